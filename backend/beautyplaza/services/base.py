# backend/beautyplaza/services/base.py
"""
Common plumbing for Beauty Plaza services.

A service owns its session and decides when to commit. Repositories below
it only flush. Public operations are wrapped with ``measure_operation`` so
every call lands in the Prometheus service histograms.
"""

from contextlib import contextmanager
from functools import wraps
import logging
import time
from typing import Any, Callable, Iterator, Optional, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import ServiceException
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

SLOW_OPERATION_SECONDS = 1.0

F = TypeVar("F", bound=Callable[..., Any])


class BaseService:
    """Session holder with transaction, timing and logging helpers."""

    def __init__(self, db: Session):
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Commit on clean exit, roll back on any error.

        Database errors are re-raised as ServiceException. Domain exceptions
        pass through untouched so routes can map them to status codes.
        """
        try:
            yield self.db
            self.db.commit()
        except SQLAlchemyError as exc:
            self.logger.error("Transaction rolled back after database error: %s", exc)
            self.db.rollback()
            raise ServiceException(f"Database operation failed: {exc}") from exc
        except Exception:
            self.db.rollback()
            raise

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """Time a service method and report it as ``operation_name``."""

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self, *args, **kwargs):
                started = time.perf_counter()
                error_type: Optional[str] = None
                try:
                    return func(self, *args, **kwargs)
                except Exception as exc:
                    error_type = type(exc).__name__
                    raise
                finally:
                    _report(self, operation_name, time.perf_counter() - started, error_type)

            return cast(F, wrapper)

        return decorator

    def log_operation(self, operation: str, **context: Any) -> None:
        self.logger.info(f"Operation: {operation}", extra={"operation": operation, **context})


def _report(service: Any, operation: str, elapsed: float, error_type: Optional[str]) -> None:
    if elapsed > SLOW_OPERATION_SECONDS:
        getattr(service, "logger", logger).warning(
            f"Slow operation detected: {operation} took {elapsed:.2f}s"
        )

    prometheus_metrics.record_service_operation(
        service=service.__class__.__name__,
        operation=operation,
        duration=elapsed,
        status="error" if error_type else "success",
        error_type=error_type,
    )
