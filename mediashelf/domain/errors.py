# mediashelf/domain/errors.py
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional


class MediaShelfError(Exception):
    """Base exception for all persistence-layer failures surfaced to callers."""

    code = "error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Args:
            message: Human-readable error message
            details: Additional machine-readable context (ids, names, keys)
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Dictionary form for the transport layer to encode."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(MediaShelfError):
    """Raised when an identity has no matching row."""

    code = "not_found"

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(
            f"{entity_type} with ID {entity_id} not found",
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class DuplicateError(MediaShelfError):
    """Raised when a tag name is already taken."""

    code = "duplicate"

    def __init__(self, entity_type: str, field: str, value: Any):
        super().__init__(
            f"{entity_type} with {field} '{value}' already exists",
            {"entity_type": entity_type, "field": field, "value": value},
        )


class InvalidReferenceError(MediaShelfError):
    """Raised when a referenced tag id does not exist."""

    code = "invalid_reference"

    def __init__(self, entity_type: str, missing_ids: Iterable[Any]):
        missing = sorted(str(i) for i in missing_ids)
        super().__init__(
            f"Unknown {entity_type} id(s): {', '.join(missing)}",
            {"entity_type": entity_type, "missing_ids": missing},
        )


class ConstraintViolationError(MediaShelfError):
    """Storage-level integrity failure, e.g. a race lost to a uniqueness constraint."""

    code = "constraint_violation"


class StorageUnavailableError(MediaShelfError):
    """The object-storage adapter failed during upload or delete."""

    code = "storage_unavailable"

    def __init__(self, operation: str, key: str, reason: str = ""):
        msg = f"Object storage {operation} failed for key '{key}'"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, {"operation": operation, "key": key})


class TransactionFailedError(MediaShelfError):
    """Any other error inside an atomic multi-statement operation; the work was rolled back."""

    code = "transaction_failed"
