"""FastAPI 의존성 주입 팩토리.

lifespan에서 생성한 서비스 인스턴스를 FastAPI의 ``Depends()``를 통해 제공한다.
"""
from fastapi import Request
from fastapi.templating import Jinja2Templates

from password_please.exceptions import ServiceUnavailableError
from password_please.services.password_service import PasswordService


def get_password_service(request: Request) -> PasswordService:
    """앱 상태에 등록된 PasswordService를 반환한다.

    Raises:
        ServiceUnavailableError: lifespan이 아직 서비스를 시작하지 않은 경우.
    """
    service = getattr(request.app.state, "password_service", None)
    if service is None:
        raise ServiceUnavailableError("Password service is not running")
    return service


def get_templates(request: Request) -> Jinja2Templates:
    """앱 상태에 등록된 Jinja2Templates를 반환한다."""
    return request.app.state.templates
