from __future__ import annotations

from uuid import uuid4


def new_trace_id() -> str:
    return uuid4().hex


class TrackedError(Exception):
    def __init__(self, message: str, *, error_type: str, trace_id: str | None = None) -> None:
        self.error_type = error_type
        self.trace_id = trace_id or new_trace_id()
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""

    def with_trace(self) -> str:
        return f"{self.message} (trace_id={self.trace_id})"

    def to_payload(self) -> dict:
        return {"error": self.error_type, "message": self.message, "trace_id": self.trace_id}


class InvalidPathError(TrackedError):
    """Path does not address a leaf of the settings schema."""

    def __init__(self, path: str, *, reason: str = "unknown setting", trace_id: str | None = None) -> None:
        self.path = path
        super().__init__(f"Invalid settings path '{path}': {reason}", error_type="invalid_path", trace_id=trace_id)


class MissingPathError(TrackedError):
    """Desktop layer lacks a leaf that the schema guarantees."""

    def __init__(self, path: str, *, trace_id: str | None = None) -> None:
        self.path = path
        super().__init__(
            f"Desktop settings are missing '{path}'",
            error_type="missing_path",
            trace_id=trace_id,
        )


class InvalidValueError(TrackedError):
    def __init__(self, path: str, value: object, *, reason: str = "", trace_id: str | None = None) -> None:
        self.path = path
        self.value = value
        message = f"Invalid value {value!r} for '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, error_type="invalid_value", trace_id=trace_id)


class NotFoundError(TrackedError):
    def __init__(self, message: str, *, trace_id: str | None = None) -> None:
        super().__init__(message, error_type="not_found", trace_id=trace_id)


class MalformedImportError(TrackedError):
    def __init__(self, message: str, *, trace_id: str | None = None) -> None:
        super().__init__(message, error_type="malformed_import", trace_id=trace_id)


class PersistenceError(TrackedError):
    def __init__(self, message: str, *, trace_id: str | None = None) -> None:
        super().__init__(message, error_type="persistence", trace_id=trace_id)


class MalformedColorError(ValueError):
    """Raised by the color parser; callers recover with a fallback filter."""


__all__ = [
    "new_trace_id",
    "TrackedError",
    "InvalidPathError",
    "MissingPathError",
    "InvalidValueError",
    "NotFoundError",
    "MalformedImportError",
    "PersistenceError",
    "MalformedColorError",
]
