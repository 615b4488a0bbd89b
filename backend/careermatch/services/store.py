from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from careermatch.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Outcome of one store read: either data (possibly empty) or an error message."""

    data: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def or_default(self, default: T) -> T:
        if not self.ok or self.data is None:
            return default
        return self.data


def run_query(
    label: str,
    fn: Callable[[], T],
    *,
    db: Session | None = None,
    max_retries: int | None = None,
    retry_delay_seconds: float | None = None,
) -> QueryResult[T]:
    retries = settings.db_max_retries if max_retries is None else max_retries
    delay = settings.db_retry_delay_seconds if retry_delay_seconds is None else retry_delay_seconds

    last_error = "unknown error"
    for attempt in range(1, retries + 2):
        try:
            return QueryResult(data=fn())
        except OperationalError as exc:
            last_error = _describe(exc)
            _rollback(db)
            if attempt <= retries:
                logger.warning("%s failed (attempt %d/%d): %s", label, attempt, retries + 1, last_error)
                time.sleep(_backoff_seconds(delay, attempt))
                continue
        except SQLAlchemyError as exc:
            last_error = _describe(exc)
            _rollback(db)
            break

    logger.error("Error in %s: %s", label, last_error)
    return QueryResult(error=last_error)


def _rollback(db: Session | None) -> None:
    if db is None:
        return
    try:
        db.rollback()
    except SQLAlchemyError:
        logger.debug("rollback after failed query also failed", exc_info=True)


def _describe(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig or exc).strip() or exc.__class__.__name__


def _backoff_seconds(base: float, attempt: int) -> float:
    cap = 10.0
    return min(cap, base * (2 ** (attempt - 1)))
