"""Result types for railway-oriented programming.

Every cache, lock and scheduler operation returns a Result instead of raising,
so callers decide explicitly how to react to a backend or loader failure.

Usage:
    result = await cache_client.query_with_pass_through(
        "cache:shop:", 1, Shop, load_shop, ttl=1800
    )
    match result:
        case Success(value=None):
            # Confirmed absent (null marker or loader returned None)
            ...
        case Success(value=shop):
            ...
        case Failure(error=error):
            logger.warning("Shop lookup failed", error_code=error.code.value)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value (None is a valid value).
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


# Type alias for Result union
Result = Success[T] | Failure[E]
