"""
Exception types raised by the snapshot export/import engine and the entity store.
"""

from typing import Any, List, Optional


class SnapshotError(Exception):
    """Base class for snapshot export/import failures."""


class InvalidSnapshotError(SnapshotError):
    """The document does not match the snapshot shape."""

    def __init__(self, message: str = "Invalid data format", errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


class UnsupportedSnapshotVersionError(SnapshotError):
    """The document declares a snapshot version this engine cannot read."""

    def __init__(self, version: Any):
        super().__init__(f"Unsupported data version: {version}")
        self.version = version


class SnapshotExportError(SnapshotError):
    """Opaque export failure; the cause is logged, never returned to callers."""

    def __init__(self, message: str = "Failed to export user data"):
        super().__init__(message)


class SnapshotImportError(SnapshotError):
    """Opaque import failure; the cause is logged, never returned to callers."""

    def __init__(self, message: str = "Failed to import user data"):
        super().__init__(message)


class StoreError(Exception):
    """A single store operation was rejected."""


class RecordOwnershipError(StoreError):
    """The record, or a record it references, belongs to another user."""


class MissingReferenceError(StoreError):
    """A foreign key points at a record that does not exist."""
