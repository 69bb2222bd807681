"""구조화된 JSON 로깅 포매터.

LOG_FORMAT=json 환경변수 설정 시 모든 로그를 JSON 형식으로 출력한다.
컨테이너 로그 수집 시스템과의 연동을 용이하게 한다.
"""
import json
import logging
import traceback
from datetime import UTC, datetime

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# LogRecord 기본 속성 (extra 필드와 구분하기 위함)
_SKIP_FIELDS = frozenset({
    "name", "msg", "args", "created", "relativeCreated",
    "exc_info", "exc_text", "stack_info", "lineno", "funcName",
    "filename", "module", "pathname", "thread", "threadName",
    "process", "processName", "levelname", "levelno", "msecs",
    "message", "taskName", "color_message",
})


class JsonFormatter(logging.Formatter):
    """로그 레코드를 JSON 문자열로 포매팅하는 포매터.

    한 레코드당 한 줄의 JSON 객체를 출력한다.
    """

    def format(self, record: logging.LogRecord) -> str:
        """로그 레코드를 JSON 문자열로 변환한다."""
        log_entry: dict = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        # extra 필드 병합 (logger.info("...", extra={...}))
        for key, value in record.__dict__.items():
            if key not in _SKIP_FIELDS and not key.startswith("_"):
                log_entry[key] = value

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def configure_logging(log_format: str = "text", log_level: str = "INFO") -> None:
    """애플리케이션 로깅을 설정한다.

    Args:
        log_format: 로그 형식. "json" 또는 "text".
        log_level: 로그 레벨. 기본값 "INFO".
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # 기존 핸들러 제거
    root_logger.handlers.clear()

    handler = logging.StreamHandler()

    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root_logger.addHandler(handler)

    # 비밀번호 요청마다 찍히는 access 로그는 WARNING 이상만
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def uvicorn_log_config(log_format: str = "text") -> dict:
    """configure_logging과 같은 형식을 쓰는 uvicorn log_config를 만든다."""
    default_formatter: dict = {"fmt": TEXT_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"}
    if log_format == "json":
        default_formatter = {"()": "password_please.utils.logging.JsonFormatter"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "access": {
                "()": "uvicorn.logging.AccessFormatter",
                "fmt": "%(asctime)s - %(levelname)s - %(client_addr)s - \"%(request_line)s\" %(status_code)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "default": default_formatter,
        },
        "handlers": {
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
            },
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "uvicorn.access": {
                "handlers": ["access"],
                "level": "WARNING",
                "propagate": False,
            },
            "uvicorn.error": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False,
            },
        },
    }
