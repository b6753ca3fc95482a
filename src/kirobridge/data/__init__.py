"""Data structures for the bridge.

These modules hold path layout, typed records with strict from_dict parsing,
and a light file-backed store so components can be tested against tmp dirs.
"""

from .paths import WorkspacePaths
from .spec_store import FileSpecStore
from .spec_types import (
    HookDescriptor,
    ImplementationMetadata,
    KiroConfig,
    SyncProgress,
    TaskItem,
    ValidationResult,
)

__all__ = [
    "WorkspacePaths",
    "FileSpecStore",
    "HookDescriptor",
    "ImplementationMetadata",
    "KiroConfig",
    "SyncProgress",
    "TaskItem",
    "ValidationResult",
]
