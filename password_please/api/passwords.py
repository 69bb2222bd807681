"""비밀번호 API 라우터.

인덱스 페이지, 텍스트 비밀번호 API, 카운터 조회 엔드포인트를 제공한다.
모든 응답은 브라우저 캐시를 사용하지 않는다.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.templating import Jinja2Templates

from password_please.core.deps import get_password_service, get_templates
from password_please.core.templates import INDEX_TEMPLATE
from password_please.services.generator import (
    MAX_PASSWORD_LENGTH,
    MIN_PASSWORD_LENGTH,
    clamp_length,
)
from password_please.services.password_service import PasswordService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Passwords"])

NO_CACHE_HEADERS = {"Cache-Control": "no-cache"}


def _plain_text(body: str) -> PlainTextResponse:
    """캐시 금지 헤더와 명시적 Content-Length를 가진 text/plain 응답을 만든다."""
    headers = dict(NO_CACHE_HEADERS)
    headers["Content-Length"] = str(len(body.encode("utf-8")))
    return PlainTextResponse(body, headers=headers)


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    service: PasswordService = Depends(get_password_service),
    templates: Jinja2Templates = Depends(get_templates),
):
    """최소 길이 비밀번호와 현재 카운터를 보여주는 인덱스 페이지."""
    password = await service.get_password(MIN_PASSWORD_LENGTH)
    return templates.TemplateResponse(
        request,
        INDEX_TEMPLATE,
        {
            "password": password,
            "counter": service.counter,
            "host": request.headers.get("host", ""),
            "min_length": MIN_PASSWORD_LENGTH,
            "max_length": MAX_PASSWORD_LENGTH,
        },
        headers=NO_CACHE_HEADERS,
    )


@router.get("/password.txt", response_class=PlainTextResponse)
async def password_text(
    length: Optional[str] = Query(
        None, alias="len", description=f"비밀번호 길이 ({MIN_PASSWORD_LENGTH}-{MAX_PASSWORD_LENGTH})"
    ),
    service: PasswordService = Depends(get_password_service),
):
    """비밀번호를 text/plain으로 반환한다.

    Args:
        length: 요청 길이. 잘못된 값이나 누락 시 최소 길이, 범위를 벗어나면 경계값으로 보정된다.
    """
    password = await service.get_password(clamp_length(length))
    return _plain_text(password)


@router.get("/counter", response_class=PlainTextResponse)
async def counter(service: PasswordService = Depends(get_password_service)):
    """지금까지 생성된 비밀번호 수를 반환한다."""
    return _plain_text(str(service.counter))
