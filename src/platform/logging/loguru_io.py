"""
Call tracing decorator

`@Logger.io` logs arguments and return values of store, ledger and use-case
methods at DEBUG, indented by call depth, and logs the first failure seen on the
way up. Domain outcomes (a full event, a duplicate RSVP) log as warnings without a
traceback; everything else logs with one.
"""

from functools import wraps
from inspect import iscoroutinefunction
import types
from typing import TYPE_CHECKING, Any, Callable, ParamSpec, TypeVar, cast, overload


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io_config import ExtraField, call_depth_var, custom_logger
from src.platform.logging.loguru_io_utils import (
    build_call_target_func_path,
    fetch_layer_depth,
    get_chain_start_time,
    mask_sensitive,
    normalize_args_kwargs,
    reset_call_depth,
    should_mask_keyword,
    truncate_content,
)


_F = TypeVar('_F', bound=Callable[..., Any])
_P = ParamSpec('_P')
_T = TypeVar('_T')

_LOGGED_MARKER = '_io_logged'


class LoguruIO:
    def __init__(
        self, custom_logger: 'LoguruLogger', *, reraise: bool = True, truncate_content: bool = False
    ) -> None:
        self._custom_logger = custom_logger
        self.reraise = reraise
        self.truncate_content = truncate_content
        self.extra: dict[str, Any] = {}
        self.depth = 2

    def _emit(self, text: str) -> None:
        self._custom_logger.bind(**self.extra).opt(depth=self.depth + 1).debug(text)

    def on_enter(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        call_depth_var.set(call_depth_var.get() + 1)
        self.extra[ExtraField.CHAIN_START_TIME] = get_chain_start_time()
        if settings.DEBUG:
            self._emit(
                f'{fetch_layer_depth()}args: {self.scrub(args)}, kwargs: {self.scrub(kwargs)}'
            )

    def on_return(self, value: Any) -> None:
        if settings.DEBUG:
            self._emit(f'{fetch_layer_depth()}return: {self.scrub(value)}')

    def on_error(self, error: Exception) -> None:
        if getattr(error, _LOGGED_MARKER, False):
            return
        setattr(error, _LOGGED_MARKER, True)
        bound = self._custom_logger.bind(**self.extra).opt(depth=self.depth + 1)
        text = f'{type(error).__name__}: {error}'
        if isinstance(error, CustomBaseError):
            bound.warning(text)
        else:
            bound.exception(text)

    def scrub(self, data: Any) -> Any:
        if isinstance(data, dict):
            cleaned: Any = {
                key: self.scrub(should_mask_keyword(key, value)) for key, value in data.items()
            }
        elif isinstance(data, list | tuple):
            cleaned = type(data)(self.scrub(item) for item in data)
        else:
            cleaned = mask_sensitive(data)
        return truncate_content(cleaned) if self.truncate_content else cleaned

    def _point_traceback_at_loguru(self, wrapper: Callable[..., Any]) -> Callable[..., Any]:
        # Loguru hides frames from its own file in backtraces
        loguru_file = cast(types.FunctionType, self._custom_logger.catch).__code__.co_filename
        wrapper.__code__ = wrapper.__code__.replace(co_filename=loguru_file)
        return wrapper

    def _wrap_async(self, func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                self.on_enter(args, kwargs)
                args, kwargs = normalize_args_kwargs(func, *args, **kwargs)
                value = await func(*args, **kwargs)
                self.on_return(value)
                return value
            except Exception as e:
                self.on_error(e)
                if self.reraise:
                    raise
                return None
            finally:
                reset_call_depth()

        return async_wrapper

    def _wrap_sync(self, func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                self.on_enter(args, kwargs)
                args, kwargs = normalize_args_kwargs(func, *args, **kwargs)
                value = func(*args, **kwargs)
                self.on_return(value)
                return value
            except Exception as e:
                self.on_error(e)
                if self.reraise:
                    raise
                return None
            finally:
                reset_call_depth()

        return sync_wrapper

    def __call__(self, func: _F) -> _F:
        self.extra[ExtraField.CALL_TARGET] = build_call_target_func_path(func)
        wrapper = self._wrap_async(func) if iscoroutinefunction(func) else self._wrap_sync(func)
        return cast(_F, self._point_traceback_at_loguru(wrapper))


class Logger:
    base = custom_logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, reraise: bool = ..., truncate_content: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, reraise: bool = True, truncate_content: bool = True
    ) -> Callable[_P, _T] | LoguruIO:
        decorator = LoguruIO(
            custom_logger=custom_logger, reraise=reraise, truncate_content=truncate_content
        )
        return decorator(func) if func else decorator
