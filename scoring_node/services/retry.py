"""Optimistic retry for writes that can lose a uniqueness race."""
import logging

from sqlalchemy.exc import IntegrityError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)


def conflict_retry(max_attempts: int = 3):
    """
    Retry decorator for idempotent operations that may collide on a unique
    constraint with a concurrent run. The wrapped callable must roll back its
    own unit of work before the exception escapes.
    """
    return retry(
        retry=retry_if_exception_type(IntegrityError),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
