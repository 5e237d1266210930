"""
Logging utilities for the feedback service.

Provides:
- setup_cloud_logging(): structured JSON logging on Cloud Functions, plain text locally
- @log_function decorator: logs entry/exit/errors with timing, masking secrets
"""

import functools
import inspect
import logging
import os
import time
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


def setup_cloud_logging():
    """Configure logging for the current environment.

    On GCP (Cloud Functions sets K_SERVICE automatically):
      Uses google-cloud-logging's handler so records arrive in Cloud Logging
      as structured JSON with severity and source location.

    Locally:
      Falls back to basicConfig for readable console output.

    LOG_LEVEL (e.g. "DEBUG") overrides the default INFO level in both cases.
    """
    level_name = os.environ.get("LOG_LEVEL", "INFO").strip().upper()
    level = getattr(logging, level_name, logging.INFO)

    if os.environ.get("K_SERVICE"):
        import google.cloud.logging
        client = google.cloud.logging.Client()
        client.setup_logging(log_level=level)
    else:
        logging.basicConfig(level=level)


# Parameter names whose values must never reach the logs
SENSITIVE_PARAMS = frozenset({
    'api_key', 'resend_api_key', 'secret', 'hmac_secret', 'token',
    'settings', 'password',
})

REDACTED = "***"


def _summarize(value: Any, max_len: int = 120) -> str:
    """One-line summary of a return value: HTTP status, enum member, or short repr."""
    # Flask view results: (body, status, headers)
    if isinstance(value, tuple) and len(value) == 3 and isinstance(value[1], int):
        return f"HTTP {value[1]}"

    if isinstance(value, Enum):
        return f"{type(value).__name__}.{value.name}"

    if isinstance(value, str):
        if len(value) > max_len:
            return f"str({len(value)} chars): {value[:max_len]}..."
        return f"str: {value}"

    return _clip(repr(value), max_len)


def _clip(text: str, max_len: int) -> str:
    return text if len(text) <= max_len else f"{text[:max_len]}..."


def _format_params(func: Callable, args: tuple, kwargs: dict) -> str:
    """Format function parameters for logging, masking sensitive values."""
    sig = inspect.signature(func)
    bound = sig.bind(*args, **kwargs)
    bound.apply_defaults()

    parts = []
    for name, value in bound.arguments.items():
        if name in ('self', 'cls'):
            continue
        if name in SENSITIVE_PARAMS:
            parts.append(f"{name}={REDACTED}")
        else:
            parts.append(f"{name}={_clip(repr(value), 80)}")

    return ", ".join(parts)


def log_function(func: Callable | None = None, *, redact_result: bool = False) -> Callable:
    """
    Decorator that logs function entry, exit, duration, and errors.

    Usage:
        @log_function
        def my_function(x, y):
            return x + y

        @log_function(redact_result=True)
        def make_credential():
            ...
    """
    if func is None:
        return functools.partial(log_function, redact_result=redact_result)

    qual_name = func.__qualname__

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            params_str = _format_params(func, args, kwargs)
        except Exception:
            params_str = "(unable to format params)"

        logger.info(f"▶ {qual_name}({params_str})")
        start = time.time()

        try:
            result = func(*args, **kwargs)
            elapsed = time.time() - start
            result_summary = REDACTED if redact_result else _summarize(result)
            logger.info(f"◀ {qual_name} → {result_summary} [{elapsed:.2f}s]")
            return result
        except Exception:
            elapsed = time.time() - start
            logger.info(f"◀ {qual_name} FAILED [{elapsed:.2f}s]")
            raise

    return wrapper
