"""LoggerProtocol definition for structured logging.

Every cache component receives a logger through its constructor instead of
reaching for a module global, so tests can pass a MagicMock and the
composition root decides the renderer.

Log levels used by the cache layer:
    - DEBUG: Hits, misses, null-marker hits, lock acquisition
    - INFO: Stale value served with a rebuild scheduled, rebuild completed
    - WARNING: Corrupt payload, rebuild rejected, mutex wait exhausted,
      write-back failure
    - ERROR: Background rebuild failed
    - CRITICAL: Not used by the cache layer; reserved for the host process

Usage:
    from src.core.container import get_logger

    logger = get_logger().bind(component="cache_client")
    logger.info("Stale entry served", key=key, expired_for_seconds=5.2)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    All logging calls are structured: a constant message plus key-value
    context. Implementations enrich logs with timestamp and level.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            **context: Structured key-value context fields.
        """
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception instance; implementations add
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message for unrecoverable failures."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return new logger with permanently bound context.

        The original logger remains unchanged.

        Example:
            rebuild_logger = logger.bind(key=key, strategy="logical_expire")
            rebuild_logger.info("Rebuild started")
        """
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for bind()."""
        ...
