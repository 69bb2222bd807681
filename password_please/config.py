"""
Configuration settings for Random Password Please
"""
import os
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Listen address; PORT follows the usual PaaS convention
    http_host: str = os.getenv("HTTP_HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))

    # Optional file to load/save the password counter. Unset = in-memory only.
    counter_file: Optional[str] = os.getenv("COUNTER_FILE") or None

    # Directory searched for an index.html overriding the bundled page
    template_dir: str = os.getenv("TEMPLATE_DIR", ".")

    app_name: str = "Random Password Please"
    app_version: str = "1.0.0"

    # Passwords generated ahead of requests
    password_buffer_size: int = 10

    # Counter is written to disk every N generated passwords
    counter_flush_interval: int = 100

    # Logging: "json" for production, "text" for development
    log_format: str = "text"
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "case_sensitive": False, "extra": "ignore"}

    @property
    def persistence_enabled(self) -> bool:
        """Whether a counter file was configured."""
        return bool(self.counter_file)

    @property
    def listen_address(self) -> str:
        """Listen address in host:port form, for log messages."""
        return f"{self.http_host}:{self.port}"


settings = Settings()
