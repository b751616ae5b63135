"""Infrastructure errors package.

Usage:
    from src.infrastructure.errors import CacheError, SerializationError
"""

from src.infrastructure.errors.infrastructure_error import (
    CacheError,
    InfrastructureError,
    SerializationError,
)

__all__ = [
    "InfrastructureError",
    "CacheError",
    "SerializationError",
]
