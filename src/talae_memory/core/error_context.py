"""Snapshot of a failure for structured logging."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from .base import ApplicationError
from .logging import get_log_context


@dataclass(frozen=True)
class ErrorContext:
    """An error plus the log context that was bound when it was raised.

    ``trace_id`` ties together the log lines emitted for one failure.
    """

    error: Exception
    trace_id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    context: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def capture(cls, error: Exception, **context: Any) -> "ErrorContext":
        """Capture ``error`` together with the currently bound log context."""
        return cls(error=error, context={**get_log_context(), **context})

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "error_type": type(self.error).__name__,
            "error_message": str(self.error),
            "trace_id": self.trace_id,
            "timestamp": self.timestamp.isoformat(),
        }
        if isinstance(self.error, ApplicationError):
            data["error_code"] = self.error.code.value
            data["error_level"] = self.error.level.value
            data["details"] = self.error.details.model_dump(exclude_none=True)
        if self.context:
            data["context"] = dict(self.context)
        return data
