from inspect import Parameter, getfile, getsourcelines, signature
from os.path import basename
import re
from time import time
from typing import Any, Callable

from src.platform.logging.loguru_io_config import (
    DEPTH_LINE,
    MAX_LOG_CONTENT_LENGTH,
    SENSITIVE_KEYWORDS,
    call_depth_var,
    chain_start_time_var,
)


MASK = '********'

# phone='...' inside attrs reprs, 'phone': '...' inside dict reprs
_SENSITIVE_PATTERN = re.compile(
    r"(\b(?:%s)\b)(=|': ?)'[^']*'" % '|'.join(sorted(SENSITIVE_KEYWORDS, key=len, reverse=True))
)


def get_chain_start_time() -> float:
    started = chain_start_time_var.get()
    if not started:
        started = time()
        chain_start_time_var.set(started)
    return started


def fetch_layer_depth() -> str:
    return DEPTH_LINE * max(call_depth_var.get() - 1, 0)


def reset_call_depth() -> None:
    remaining = call_depth_var.get() - 1
    call_depth_var.set(remaining)
    if remaining == 0:
        chain_start_time_var.set(0)


def build_call_target_func_path(func: Callable[..., Any]) -> str:
    target = getattr(func, '__func__', func)
    try:
        _, lineno = getsourcelines(target)
    except (OSError, TypeError):
        lineno = 0
    return f'{basename(getfile(target))}::{func.__qualname__}:{lineno}'


def normalize_args_kwargs(
    func: Callable[..., Any], *args: Any, **kwargs: Any
) -> tuple[tuple[Any, ...], dict[str, Any]]:
    """Drop keyword arguments the target does not accept and positional overflow."""
    params = signature(getattr(func, '__wrapped__', func)).parameters.values()
    kinds = {param.kind for param in params}

    if Parameter.VAR_KEYWORD not in kinds:
        accepted = {
            param.name
            for param in params
            if param.kind not in (Parameter.POSITIONAL_ONLY, Parameter.VAR_POSITIONAL)
        }
        kwargs = {key: value for key, value in kwargs.items() if key in accepted}

    if Parameter.VAR_POSITIONAL not in kinds:
        positional = [
            param.name
            for param in params
            if param.kind in (Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD)
            and param.name not in kwargs
        ]
        args = args[: len(positional)]

    return args, kwargs


def mask_sensitive(data: Any) -> Any:
    """Mask `phone='...'` style fragments in reprs of attrs entities and dicts."""
    text = str(data)
    masked = _SENSITIVE_PATTERN.sub(rf"\1\2'{MASK}'", text)
    return data if masked == text else masked


def should_mask_keyword(keyword: Any, value: Any) -> Any:
    return MASK if keyword in SENSITIVE_KEYWORDS and value is not None else value


def truncate_content(data: Any) -> Any:
    if isinstance(data, str | bytes) and len(data) > MAX_LOG_CONTENT_LENGTH:
        return f'{data[:MAX_LOG_CONTENT_LENGTH]!r}... ({len(data)} chars)'
    return data
