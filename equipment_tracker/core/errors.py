"""Error taxonomy surfaced by the record store and its callers."""

from __future__ import annotations

from typing import Any, Iterable


class TrackerError(Exception):
    """Base class for every error raised by the tracker core."""


class ValidationError(TrackerError):
    """A required field is missing or a value is outside its allowed set."""

    def __init__(self, message: str, fields: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.fields = tuple(fields)

    @classmethod
    def from_pydantic(cls, exc: Any) -> "ValidationError":
        """Build from a ``pydantic.ValidationError``, keeping the field names."""

        fields: list[str] = []
        problems: list[str] = []
        for error in exc.errors():
            loc = ".".join(str(part) for part in error.get("loc", ())) or "__root__"
            fields.append(loc)
            problems.append(f"{loc}: {error.get('msg', 'invalid value')}")
        return cls("; ".join(problems) or "invalid equipment data", fields)


class NotFound(TrackerError):
    """An operation referenced an equipment id that is not stored."""

    def __init__(self, record_id: int) -> None:
        super().__init__(f"equipment {record_id} not found")
        self.record_id = record_id


class StorageUnavailable(TrackerError):
    """The underlying database could not be opened, read or written."""


__all__ = ["TrackerError", "ValidationError", "NotFound", "StorageUnavailable"]
