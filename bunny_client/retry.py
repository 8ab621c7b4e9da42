"""
Retry policy for bunny.net API requests.

Only idempotent methods are retried, and only on transient status codes
(timeouts, rate limits, server and origin errors). The delay between
attempts is left to urllib3's exponential backoff.
"""

import logging

from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

# POST, PUT and PATCH may have partially applied; never replay them.
RETRY_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "DELETE", "TRACE"})

RETRY_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504, 521, 522, 524})


def should_retry(method: str, status_code: int, attempt: int, retry_limit: int) -> bool:
    """Decide whether a failed attempt may be retried.

    Args:
        method: HTTP method of the request.
        status_code: Status code of the failed response.
        attempt: Number of the attempt that just failed (1 for the first).
        retry_limit: Maximum number of retries after the first attempt.

    Returns:
        True if another attempt should be made.
    """
    return (
        method.upper() in RETRY_METHODS
        and status_code in RETRY_STATUS_CODES
        and attempt <= retry_limit
    )


class BunnyRetry(Retry):
    """urllib3 Retry that asks should_retry() before each retry."""

    def __init__(self, *args, retry_limit: int = 3, **kwargs):
        super().__init__(*args, **kwargs)
        self.retry_limit = retry_limit

    @classmethod
    def from_options(cls, options) -> "BunnyRetry":
        """Build the retry policy from resolved client options."""
        return cls(
            total=options.retry_limit,
            backoff_factor=options.backoff_factor,
            status_forcelist=RETRY_STATUS_CODES,
            allowed_methods=RETRY_METHODS,
            raise_on_status=False,
            retry_limit=options.retry_limit,
        )

    def new(self, **kw) -> "BunnyRetry":
        kw.setdefault("retry_limit", self.retry_limit)
        return super().new(**kw)

    def is_retry(self, method: str, status_code: int, has_retry_after: bool = False) -> bool:
        attempt = len(self.history) + 1
        retry = should_retry(method, status_code, attempt, self.retry_limit)
        if retry:
            logger.debug(
                f"Retrying {method} after {status_code} (attempt {attempt} of {self.retry_limit + 1})"
            )
        return retry
