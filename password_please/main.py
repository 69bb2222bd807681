"""Random Password Please FastAPI 애플리케이션."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from password_please.api import passwords
from password_please.config import Settings, settings
from password_please.core.deps import get_password_service
from password_please.core.templates import setup_templates
from password_please.exceptions import AppError
from password_please.models import HealthResponse, HealthStatus
from password_please.services.counter_store import CounterStore
from password_please.services.password_service import PasswordService
from password_please.services.shutdown import ShutdownCoordinator
from password_please.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Optional[Settings] = None,
    stop_server: Optional[Callable[[], None]] = None,
) -> FastAPI:
    """설정에 맞는 FastAPI 애플리케이션을 생성한다.

    Args:
        app_settings: 애플리케이션 설정. 생략 시 환경변수 기반 전역 설정.
        stop_server: 지정하면 앱이 SIGINT/SIGTERM을 직접 처리한다. 마지막 카운터 저장 후
            이 콜백으로 서버 종료를 요청한다.
    """
    cfg = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """애플리케이션 시작/종료 이벤트를 관리한다.

        카운터 파일을 읽지 못하면 예외가 전파되어 서버가 시작되지 않는다.
        """
        logger.info("Starting %s v%s", cfg.app_name, cfg.app_version)
        if cfg.persistence_enabled:
            logger.info("Persisting password counter to %s", cfg.counter_file)
        else:
            logger.warning("No counter file configured, counter resets on restart")

        service = PasswordService(
            store=CounterStore(cfg.counter_file),
            buffer_size=cfg.password_buffer_size,
            flush_interval=cfg.counter_flush_interval,
        )
        await service.start()

        coordinator = ShutdownCoordinator(service, on_terminate=stop_server)
        if stop_server is not None:
            coordinator.install_signal_handlers()
        shutdown_task = asyncio.create_task(coordinator.run(), name="shutdown-coordinator")

        app.state.password_service = service
        app.state.shutdown_coordinator = coordinator
        app.state.templates = setup_templates(cfg.template_dir)

        try:
            yield
        finally:
            # 시그널 없이 종료되는 경우 (다른 ASGI 서버, 테스트)
            coordinator.request_shutdown()
            await shutdown_task
            if stop_server is not None:
                coordinator.remove_signal_handlers()
            await service.stop()
            app.state.password_service = None
            logger.info("Shutting down application")

    app = FastAPI(
        title=cfg.app_name,
        version=cfg.app_version,
        description="Random passwords, served fresh",
        lifespan=lifespan,
    )

    app.include_router(passwords.router)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """AppError를 일관된 JSON 응답으로 변환하는 글로벌 핸들러."""
        logger.warning(
            "AppError: %s - %s",
            exc.code,
            exc.message,
            extra={
                "path": request.url.path,
                "method": request.method,
                "error_code": exc.code,
                "status_code": exc.status_code,
            },
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """예상치 못한 예외를 처리하고 클라이언트에 일반적인 에러 응답을 반환한다."""
        logger.exception(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content=_INTERNAL_ERROR_RESPONSE)

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """헬스 체크 엔드포인트.

        비밀번호 생성기 동작 여부와 카운터 상태를 확인한다.
        종료가 시작된 뒤에는 degraded를 반환한다.
        """
        service = get_password_service(request)
        shutting_down = request.app.state.shutdown_coordinator.is_shutting_down
        healthy = service.running and not shutting_down
        return HealthResponse(
            status=HealthStatus.HEALTHY if healthy else HealthStatus.DEGRADED,
            app=cfg.app_name,
            version=cfg.app_version,
            counter=service.counter,
            buffered_passwords=service.buffered,
            persistence=cfg.persistence_enabled,
        )

    return app


_INTERNAL_ERROR_RESPONSE = {
    "error": "INTERNAL_ERROR",
    "message": "An unexpected error occurred. Please try again later.",
}

configure_logging(log_format=settings.log_format, log_level=settings.log_level)

app = create_app()
