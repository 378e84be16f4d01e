"""
`Logger.io` call tracing

Decorated adapters, use cases and workflows log their arguments and return
value at DEBUG (masked and truncated) and every failure once, at the frame
where it was raised. Client error taxonomy failures (bad credentials, sold
out, session expired) are expected outcomes and are logged without a
traceback.
"""

from collections.abc import Awaitable
from functools import wraps
from inspect import iscoroutinefunction
from time import perf_counter
from typing import TYPE_CHECKING, Any, Callable, ParamSpec, TypeVar, cast, overload


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from eventreg.platform.config.core_setting import settings
from eventreg.platform.exception.exceptions import CustomBaseError
from eventreg.platform.logging.loguru_io_config import ExtraField, call_depth_var, custom_logger
from eventreg.platform.logging.loguru_io_utils import (
    build_call_target_func_path,
    get_chain_start_time,
    mask_sensitive,
    reset_call_depth,
    should_mask_keyword,
    truncate_content,
)


_F = TypeVar('_F', bound=Callable[..., Any])
_P = ParamSpec('_P')
_T = TypeVar('_T')

_LOGGED_MARKER = '_eventreg_logged'


def _already_logged(e: BaseException) -> bool:
    if getattr(e, _LOGGED_MARKER, False):
        return True
    setattr(e, _LOGGED_MARKER, True)
    return False


class LoguruIO:
    # Points loguru at the caller of the decorated function
    _DEPTH = 2

    def __init__(
        self, base_logger: 'LoguruLogger', *, reraise: bool = True, truncate: bool = True
    ) -> None:
        self._base_logger = base_logger
        self.reraise = reraise
        self.truncate = truncate
        self._call_target = ''

    def _bound(self, depth: int = _DEPTH) -> 'LoguruLogger':
        return self._base_logger.bind(
            **{
                ExtraField.CALL_TARGET: self._call_target,
                ExtraField.CHAIN_START_TIME: get_chain_start_time(),
            }
        ).opt(depth=depth)

    def _render(self, data: Any) -> Any:
        if isinstance(data, dict):
            rendered: Any = {
                key: self._render(should_mask_keyword(key, value)) for key, value in data.items()
            }
        elif isinstance(data, list | tuple):
            rendered = type(data)(self._render(item) for item in data)
        else:
            rendered = mask_sensitive(data)
        return truncate_content(rendered) if self.truncate else rendered

    def _enter(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> float:
        call_depth_var.set(call_depth_var.get() + 1)
        # Rendering masks every argument, so it only runs when DEBUG lines are emitted
        if settings.DEBUG:
            self._bound().debug(f'args: {self._render(args)}, kwargs: {self._render(kwargs)}')
        return perf_counter()

    def _leave(self, started: float, return_value: Any) -> None:
        if settings.DEBUG:
            elapsed_ms = (perf_counter() - started) * 1000
            self._bound().debug(f'return ({elapsed_ms:.1f} ms): {self._render(return_value)}')

    def _fail(self, e: Exception) -> None:
        if _already_logged(e):
            return
        if isinstance(e, CustomBaseError):
            self._bound().warning(f'{type(e).__name__}[{e.kind}/{e.status_code}]: {e}')
        else:
            self._bound().exception(f'{type(e).__name__}: {e}')

    def __call__(self, func: _F) -> _F:
        self._call_target = build_call_target_func_path(func)

        if iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                started = self._enter(args, kwargs)
                try:
                    return_value = await cast(Awaitable[Any], func(*args, **kwargs))
                    self._leave(started, return_value)
                    return return_value
                except Exception as e:
                    self._fail(e)
                    if self.reraise:
                        raise
                    return None
                finally:
                    reset_call_depth()

            return cast(_F, async_wrapper)

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            started = self._enter(args, kwargs)
            try:
                return_value = func(*args, **kwargs)
                self._leave(started, return_value)
                return return_value
            except Exception as e:
                self._fail(e)
                if self.reraise:
                    raise
                return None
            finally:
                reset_call_depth()

        return cast(_F, sync_wrapper)


class Logger:
    base = custom_logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, reraise: bool = ..., truncate: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, reraise: bool = True, truncate: bool = True
    ) -> Callable[_P, _T] | LoguruIO:
        decorator = LoguruIO(custom_logger, reraise=reraise, truncate=truncate)
        return decorator(func) if func else decorator
