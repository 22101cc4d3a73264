"""Data models for the in-memory filesystem tree."""

from bisect import bisect_left
from dataclasses import dataclass, field
from enum import Enum
from operator import attrgetter

from pydantic import BaseModel, Field

_by_name = attrgetter("name")


class NodeKind(str, Enum):
    """Kind of tree node."""

    ROOT = "root"
    FILE = "file"
    DIRECTORY = "directory"


class EntryType(str, Enum):
    """Type of entry as reported in listings."""

    FILE = "file"
    DIRECTORY = "directory"


class ErrorKind(str, Enum):
    """Reason an operation failed."""

    INVALID_NAME = "invalid_name"
    RESERVED_NAME = "reserved_name"
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    WRONG_KIND = "wrong_kind"
    BUSY = "busy"


@dataclass(eq=False)
class Node:
    """A file or directory in the tree.

    Directories own their children through ``children``, a list kept in
    ascending name order. ``parent`` is a back reference used for traversal
    only. Root is recognised by its kind; its parent is reported as itself.
    """

    name: str
    kind: NodeKind
    _parent: "Node | None" = field(default=None, repr=False)
    children: list["Node"] = field(default_factory=list, repr=False)

    @property
    def is_root(self) -> bool:
        return self.kind is NodeKind.ROOT

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    @property
    def is_directory(self) -> bool:
        """True for directories and the root."""
        return self.kind is not NodeKind.FILE

    @property
    def parent(self) -> "Node | None":
        """Containing directory; root is its own parent."""
        if self.is_root:
            return self
        return self._parent

    @property
    def children_head(self) -> "Node | None":
        """First child in sorted order, or None for empty directories and files."""
        return self.children[0] if self.children else None

    @property
    def next(self) -> "Node | None":
        """Following sibling in the parent's child list."""
        siblings = self._siblings()
        if siblings is None:
            return None
        index = self._position(siblings) + 1
        return siblings[index] if index < len(siblings) else None

    @property
    def prev(self) -> "Node | None":
        """Preceding sibling in the parent's child list."""
        siblings = self._siblings()
        if siblings is None:
            return None
        index = self._position(siblings)
        return siblings[index - 1] if index > 0 else None

    def _siblings(self) -> list["Node"] | None:
        if self.is_root or self._parent is None:
            return None
        return self._parent.children

    def _position(self, siblings: list["Node"]) -> int:
        return bisect_left(siblings, self.name, key=_by_name)

    def find_child(self, name: str) -> "Node | None":
        """Look up a direct child by exact name.

        Args:
            name: Child name

        Returns:
            The child node, or None if no child has that name
        """
        index = bisect_left(self.children, name, key=_by_name)
        if index < len(self.children) and self.children[index].name == name:
            return self.children[index]
        return None

    def insert_child(self, child: "Node") -> None:
        """Link a new child at the position that keeps names sorted.

        The child goes immediately before the first existing child whose
        name is greater than or equal to its own, or at the end.
        """
        index = bisect_left(self.children, child.name, key=_by_name)
        child._parent = self
        self.children.insert(index, child)

    def detach_child(self, child: "Node") -> None:
        """Unlink a child from this directory's child list."""
        index = bisect_left(self.children, child.name, key=_by_name)
        if index < len(self.children) and self.children[index] is child:
            del self.children[index]
        child._parent = None

    def detach_children(self) -> None:
        """Unlink every child at once."""
        for child in self.children:
            child._parent = None
        self.children.clear()

    def ancestors(self):
        """Yield parent, grandparent, ... up to and including root."""
        node = self
        while not node.is_root and node._parent is not None:
            node = node._parent
            yield node


class DirectoryEntry(BaseModel):
    """Entry in a directory listing."""

    name: str = Field(description="Entry name")
    entry_type: EntryType = Field(description="Type of entry")

    @property
    def display_name(self) -> str:
        """Name as printed by ls; directories carry a trailing separator."""
        if self.entry_type == EntryType.DIRECTORY:
            return f"{self.name}/"
        return self.name


class DirectoryListing(BaseModel):
    """Result of listing a directory or a single file."""

    path: str = Field(description="Absolute path of the listed entry")
    entries: list[DirectoryEntry] = Field(default_factory=list, description="Directory contents")
    total_files: int = Field(default=0, description="Number of files")
    total_directories: int = Field(default=0, description="Number of directories")

    def lines(self) -> list[str]:
        return [entry.display_name for entry in self.entries]


class TreeNode(BaseModel):
    """Node in a directory tree snapshot."""

    name: str = Field(description="Entry name")
    entry_type: EntryType = Field(description="Type of entry")
    children: list["TreeNode"] = Field(default_factory=list, description="Child nodes")

    def to_string(self, prefix: str = "", is_last: bool = True, top: bool = True) -> str:
        """Convert tree node to string representation.

        Args:
            prefix: Current line prefix
            is_last: Whether this is the last sibling
            top: Whether this node is the top of the rendered tree

        Returns:
            String representation of the tree
        """
        lines: list[str] = []
        stack = [(self, prefix, is_last, top)]

        while stack:
            node, node_prefix, last, is_top = stack.pop()
            label = node.name
            if node.entry_type == EntryType.DIRECTORY and not label.endswith("/"):
                label += "/"

            if is_top:
                lines.append(f"{label}\n")
                child_prefix = node_prefix
            else:
                connector = "└── " if last else "├── "
                lines.append(f"{node_prefix}{connector}{label}\n")
                child_prefix = node_prefix + ("    " if last else "│   ")

            # Pushed in reverse so the first child is rendered first
            count = len(node.children)
            for i in reversed(range(count)):
                stack.append((node.children[i], child_prefix, i == count - 1, False))

        return "".join(lines)


class OperationResult(BaseModel):
    """Outcome of a filesystem operation."""

    ok: bool = Field(description="Whether the operation succeeded")
    error: ErrorKind | None = Field(default=None, description="Failure reason")
    message: str = Field(default="", description="Human-readable failure message")
    output: list[str] = Field(default_factory=list, description="Lines printed by the operation")

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, output: list[str] | None = None) -> "OperationResult":
        return cls(ok=True, output=output or [])

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "OperationResult":
        return cls(ok=False, error=error, message=message)
