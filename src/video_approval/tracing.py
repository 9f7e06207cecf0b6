"""MLflow tracing for approval runs, enabled only when configured.

Two layers of spans are produced:

1. **Autolog**: ``mlflow.gemini.autolog()`` records each Gemini
   ``generate_content`` request as a ``CHAT_MODEL`` span.
2. **Pipeline spans**: the ``trace()`` decorator wraps ``evaluate`` and
   ``run_batch``, producing spans that parent the autolog child spans.

The mlflow import is guarded; the tool runs fine without ``mlflow-tracing`` installed
(``pip install video-approval[tracing]``). Tracing is switched on by
:func:`setup` from an ``AppConfig``; until then ``trace()`` wrappers call
straight through.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from .config import AppConfig

logger = logging.getLogger(__name__)

try:
    import mlflow
    import mlflow.gemini

    _HAS_MLFLOW = True
except ImportError:
    _HAS_MLFLOW = False

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

_enabled = False


def is_enabled() -> bool:
    """Return True when mlflow-tracing is installed and setup() enabled it."""
    return _HAS_MLFLOW and _enabled


def trace(*, name: str | None = None, span_type: str | None = None) -> Callable[[F], F]:
    """Wrap an async callable in an MLflow span when tracing is enabled.

    Usage::

        @trace(name="run_batch", span_type="CHAIN")
        async def run_batch(...): ...
    """

    def decorator(func: F) -> F:
        span_name = name or func.__name__

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not is_enabled():
                return await func(*args, **kwargs)
            with mlflow.start_span(name=span_name, span_type=span_type or "UNKNOWN") as span:
                result = await func(*args, **kwargs)
                span.set_outputs(result)
                return result

        return wrapper  # type: ignore[return-value]

    return decorator


def setup(config: AppConfig) -> bool:
    """Configure MLflow tracking and enable Gemini autologging.

    No-op unless mlflow is installed and ``config.tracing_enabled``. Failures
    are logged and tracing stays off.

    Returns:
        Whether tracing is now enabled.
    """
    global _enabled
    if not (_HAS_MLFLOW and config.tracing_enabled):
        _enabled = False
        return False

    try:
        mlflow.set_tracking_uri(config.mlflow_tracking_uri)
        mlflow.set_experiment(config.mlflow_experiment_name)
        mlflow.gemini.autolog()
    except Exception:
        logger.warning("Could not enable MLflow tracing; running without it", exc_info=True)
        _enabled = False
        return False

    _enabled = True
    logger.info(
        "MLflow tracing enabled (uri=%s, experiment=%s)",
        config.mlflow_tracking_uri,
        config.mlflow_experiment_name,
    )
    return True


def shutdown() -> None:
    """Flush pending async traces. No-op when tracing is off."""
    if not is_enabled():
        return

    try:
        mlflow.flush_trace_async_logging()
        logger.debug("Flushed pending MLflow traces")
    except Exception:
        logger.warning("Flushing MLflow traces failed", exc_info=True)
