import asyncio
import logging
import random
from functools import wraps
from typing import Any, Callable, Coroutine, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def async_retry(
    retries: int = 2,
    delay: float = 1.0,
    backoff: float = 2.0,
    max_delay: float = 10.0,
    jitter: float = 0.1,
    catch_exceptions: type[Exception] | tuple[type[Exception], ...] = Exception,
) -> Callable[[Callable[..., Coroutine[Any, Any, T]]], Callable[..., Coroutine[Any, Any, T]]]:
    """
    A decorator for retrying an async function with exponential backoff.

    The wrapped call may pass ``retries=`` as a keyword argument to override
    the decorator default for that call only; it is not forwarded.

    Args:
        retries: The maximum number of retries.
        delay: The initial delay between retries in seconds.
        backoff: The multiplier for the delay for each subsequent retry.
        max_delay: The maximum delay between retries.
        jitter: A factor to add random jitter to the delay.
        catch_exceptions: The exception or tuple of exceptions to catch and retry on.
    """

    def decorator(func: Callable[..., Coroutine[Any, Any, T]]) -> Callable[..., Coroutine[Any, Any, T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            attempts = kwargs.pop("retries", retries)
            current_delay = delay
            for attempt in range(attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except catch_exceptions as e:
                    if attempt == attempts:
                        logger.error(
                            "Function '%s' failed after %d attempts. Last error: %s",
                            func.__name__, attempts + 1, e,
                        )
                        raise

                    logger.warning(
                        "Attempt %d/%d for '%s' failed. Retrying in %.2fs. Error: %s",
                        attempt + 1, attempts + 1, func.__name__, current_delay, e,
                    )

                    jitter_amount = current_delay * jitter * random.uniform(-1.0, 1.0)
                    await asyncio.sleep(max(current_delay + jitter_amount, 0.0))

                    current_delay = min(current_delay * backoff, max_delay)

            raise RuntimeError("Retry loop exited unexpectedly")

        return wrapper

    return decorator
