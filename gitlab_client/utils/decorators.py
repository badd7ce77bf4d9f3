"""Decorators for gitlab-client internals."""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

from gitlab_client.exceptions import RequestTimeoutError, TransportError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def translate_transport_errors(operation: str) -> Callable[[F], F]:
    """Decorator mapping httpx transport failures onto the library's error kinds.

    Args:
        operation: Description of the operation for error messages (e.g. "send request")

    Returns:
        Decorated function raising RequestTimeoutError for timeouts and
        TransportError for any other httpx.RequestError, chained to the original
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except httpx.TimeoutException as e:
                logger.debug(f"Timeout while trying to {operation}: {e}")
                raise RequestTimeoutError(f"timed out while trying to {operation}: {e}") from e
            except httpx.RequestError as e:
                logger.debug(f"Network error while trying to {operation}: {e}")
                raise TransportError(f"failed to {operation}: {e}") from e

        return wrapper  # type: ignore[return-value]

    return decorator
