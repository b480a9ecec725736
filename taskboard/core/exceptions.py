# taskboard/core/exceptions.py
"""
Error taxonomy for the API.

Every failure a service can report is one of these kinds. The HTTP layer
maps them to the response envelope in taskboard.api.errors.
"""
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence


class TaskboardError(Exception):
    """Base exception for all Taskboard errors."""
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None


class Unauthenticated(TaskboardError):
    """Missing, malformed, expired or unresolvable bearer token."""
    status_code = 401

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class ValidationError(TaskboardError):
    """Input violates a field constraint."""
    status_code = 400

    @classmethod
    def from_errors(
        cls,
        errors: Sequence[Mapping[str, Any]],
        messages: Optional[Mapping[Any, str]] = None,
        enums: Optional[Mapping[str, Iterable[str]]] = None,
    ) -> "ValidationError":
        """
        Build a single readable error from pydantic error dicts.

        `messages` maps (field, error type) to a fixed message, `enums` maps a
        field to its allowed values so enum failures list them.
        """
        messages = messages or {}
        enums = enums or {}
        parts = []
        for error in errors:
            loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
            field = loc[0] if loc else ""
            kind = error.get("type", "")

            if (field, kind) in messages:
                parts.append(messages[(field, kind)])
            elif kind == "enum" and field in enums:
                parts.append(f"Invalid {field}. Must be one of: {', '.join(enums[field])}")
            elif field:
                parts.append(f"{'.'.join(loc)}: {error.get('msg', 'invalid value')}")
            else:
                parts.append(error.get("msg", "Invalid request"))

        # Keep order, drop duplicates
        unique = list(dict.fromkeys(parts))
        return cls("; ".join(unique) or "Invalid request", {"errors": len(errors)})


class NotFound(TaskboardError):
    """Referenced record does not exist."""
    status_code = 404


class Conflict(TaskboardError):
    """Record changed between read and conditional write."""
    status_code = 409


class InternalError(TaskboardError):
    """Unexpected store or runtime failure."""
    status_code = 500

    def __init__(self, message: str = "Internal server error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
