"""
Loguru sink setup for the inventory service

One bound logger is shared by `Logger.base` and `Logger.io`. Standard-library
logging (uvicorn, sqlalchemy, httpx) is routed into it so every line carries the
same service context and layout.
"""

from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
from functools import lru_cache
import logging
import os
import re
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR as DEFAULT_LOG_DIR


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger


# Tests redirect file output with TEST_LOG_DIR
LOG_DIR = os.environ.get('TEST_LOG_DIR', str(DEFAULT_LOG_DIR))

# Masked in Logger.io argument and return dumps
SENSITIVE_KEYWORDS = frozenset({'password', 'phone', 'attendee_phone', 'webhook_secret'})
DEPTH_LINE = '│ '
MAX_LOG_CONTENT_LENGTH = 1000

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth', default=0)

# '127.0.0.1:54321 - "POST /api/event/<id>/booking HTTP/1.1" 409'
_ACCESS_LOG_STATUS = re.compile(r' - "[A-Z]+ \S+ HTTP/[\d.]+" (\d{3})')


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service = os.getenv('SERVICE_NAME', 'event-inventory')
    environment = os.getenv('DEPLOY_ENV', 'local_dev')
    return f'{service}@{environment}:{os.getpid()}'


def _empty_extra() -> dict[str, str]:
    return {
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }


def level_for_access_log(message: str) -> str | None:
    """Map a uvicorn access line to a level by its status code; None for other lines."""
    match = _ACCESS_LOG_STATUS.search(message)
    if match is None:
        return None
    status_code = int(match.group(1))
    for floor, level in ((500, 'CRITICAL'), (400, 'ERROR'), (300, 'WARNING'), (200, 'SUCCESS')):
        if status_code >= floor:
            return level
    return 'INFO'


class InterceptHandler(logging.Handler):
    """Forward stdlib records to loguru, keeping the caller's frame."""

    def __init__(self, target: 'LoguruLogger') -> None:
        super().__init__()
        self.target = target

    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()
        if record.levelno <= logging.DEBUG and message.startswith('Using selector:'):
            return

        level: str | int | None = level_for_access_log(message)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        self.target.opt(depth=depth, exception=record.exc_info).log(level, message)


def _line_format() -> str:
    columns = [
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    ]
    return ' | '.join(columns)


def _log_file_path() -> str:
    hour = datetime.now(timezone.utc).strftime('%Y-%m-%d_%H')
    prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else ''
    return f'{LOG_DIR}/{prefix}{hour}.log'


def configure_logger() -> 'LoguruLogger':
    loguru_logger.remove()
    bound = loguru_logger.bind(**_empty_extra())
    level = 'DEBUG' if settings.DEBUG else 'INFO'
    line_format = _line_format()

    bound.add(sys.stdout, format=line_format, level=level, enqueue=True)
    if settings.DEBUG:
        bound.add(
            _log_file_path(),
            format=line_format,
            level=level,
            rotation='1 hour',
            retention='7 days',
            compression='gz',
            enqueue=True,
        )

    logging.basicConfig(handlers=[InterceptHandler(bound)], level=0, force=True)
    return bound


custom_logger = configure_logger()
