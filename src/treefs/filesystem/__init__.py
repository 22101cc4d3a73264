"""In-memory filesystem tree."""

from treefs.filesystem.client import Filesystem, create_filesystem, destroy_filesystem
from treefs.filesystem.errors import (
    AlreadyExistsError,
    BusyError,
    EntryNotFoundError,
    FilesystemClosedError,
    FilesystemError,
    InvalidNameError,
    ReservedNameError,
    WrongKindError,
)
from treefs.filesystem.models import (
    DirectoryEntry,
    DirectoryListing,
    EntryType,
    ErrorKind,
    Node,
    NodeKind,
    OperationResult,
    TreeNode,
)
from treefs.filesystem.names import is_malformed, is_reserved

__all__ = [
    "Filesystem",
    "create_filesystem",
    "destroy_filesystem",
    "AlreadyExistsError",
    "BusyError",
    "EntryNotFoundError",
    "FilesystemClosedError",
    "FilesystemError",
    "InvalidNameError",
    "ReservedNameError",
    "WrongKindError",
    "DirectoryEntry",
    "DirectoryListing",
    "EntryType",
    "ErrorKind",
    "Node",
    "NodeKind",
    "OperationResult",
    "TreeNode",
    "is_malformed",
    "is_reserved",
]
