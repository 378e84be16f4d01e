"""
Loguru sinks and stdlib interception

- stderr always (stdout belongs to the embedding application)
- an hourly rotated file under LOG_DIR in DEBUG mode or when TEST_LOG_DIR is set
- stdlib loggers (httpx, asyncio) are routed through loguru; httpx request
  lines take their level from the response status
"""

from contextvars import ContextVar
from datetime import datetime
from enum import StrEnum
from functools import lru_cache
import logging
import os
from pathlib import Path
import re
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from eventreg.platform.config.core_setting import settings
from eventreg.platform.constant.path import LOG_DIR
from eventreg.platform.logging.service_context import get_service_context


# Keys whose values never reach the log output
SENSITIVE_KEYWORDS = frozenset({'password', 'token', 'authorization'})

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


# 'HTTP Request: POST http://localhost:8080/api/tickets/book "HTTP/1.1 409 Conflict"'
_HTTPX_REQUEST_LINE = re.compile(r'^HTTP Request: .* "HTTP/[\d.]+ (?P<status>\d{3})\b')

_QUIET_LOGGER_PREFIXES = ('httpcore',)


def httpx_status_level(message: str) -> str | None:
    found = _HTTPX_REQUEST_LINE.match(message)
    if found is None:
        return None
    status = int(found['status'])
    if status >= 500:
        return 'ERROR'
    if status >= 400:
        return 'WARNING'
    return 'DEBUG'


def _default_extra() -> dict[str, str]:
    return {
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }


@lru_cache(maxsize=1)
def _intercept_logger() -> 'LoguruLogger':
    return loguru_logger.bind(**_default_extra())


class InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno <= logging.DEBUG and record.name.startswith(_QUIET_LOGGER_PREFIXES):
            return

        message = record.getMessage()
        level: str | int | None = httpx_status_level(message)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        # Skip logging-module frames so the record points at the emitting code
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        _intercept_logger().opt(depth=depth, exception=record.exc_info).log(level, message)


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


def _log_file(log_dir: Path, *, test_run: bool) -> Path:
    stamp = datetime.now().astimezone().strftime('%Y-%m-%d_%H')
    return log_dir / (f'test_{stamp}.log' if test_run else f'{stamp}.log')


def configure_logging(*, debug: bool, test_log_dir: str | None = None) -> 'LoguruLogger':
    loguru_logger.remove()
    bound = loguru_logger.bind(**_default_extra())

    bound.add(sys.stderr, format=io_log_format, level='DEBUG' if debug else 'INFO')

    if debug or test_log_dir:
        log_dir = Path(test_log_dir) if test_log_dir else LOG_DIR
        log_dir.mkdir(parents=True, exist_ok=True)
        bound.add(
            _log_file(log_dir, test_run=bool(test_log_dir)),
            format=io_log_format,
            rotation='1 hour',
            retention='7 days',
            compression='gz',
            level='DEBUG',
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO, force=True)
    return bound


custom_logger = configure_logging(
    debug=settings.DEBUG, test_log_dir=os.environ.get('TEST_LOG_DIR')
)
