"""
Template setup for the index page.

index.html is looked up in the configured template directory first (the
current working directory by default), so a deployment can drop in its own
page; otherwise the page bundled with the package is used.
"""
import logging
from pathlib import Path

from fastapi.templating import Jinja2Templates
from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

logger = logging.getLogger(__name__)

INDEX_TEMPLATE = "index.html"


def setup_templates(template_dir: str = ".") -> Jinja2Templates:
    """
    Build the Jinja2Templates instance used by the index route.

    Args:
        template_dir: Directory checked for an index.html override

    Returns:
        Jinja2Templates instance
    """
    override = Path(template_dir) / INDEX_TEMPLATE
    if override.is_file():
        logger.info("Using index template %s", override)
    else:
        logger.info("Using default index template")

    env = Environment(
        loader=ChoiceLoader([
            FileSystemLoader(template_dir),
            PackageLoader("password_please", "templates"),
        ]),
        autoescape=select_autoescape(["html"]),
    )
    return Jinja2Templates(env=env)
