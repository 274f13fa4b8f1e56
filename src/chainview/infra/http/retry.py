"""Rate-limit retry policy shared by explorer clients."""

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from chainview.exceptions import RateLimitError


def rate_limit_retrying(attempts: int) -> AsyncRetrying:
    """Retry only on ``RateLimitError``; re-raise the last one when attempts run out."""
    return AsyncRetrying(
        retry=retry_if_exception_type(RateLimitError),
        stop=stop_after_attempt(max(attempts, 1)),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        reraise=True,
    )
