"""Filesystem client: the in-memory tree and its operations."""

import functools
import logging
import sys
from typing import Literal, TextIO

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
    Node,
    NodeKind,
    OperationResult,
    TreeNode,
)
from treefs.filesystem.names import CURRENT, PARENT, ROOT, SEPARATOR, is_malformed, is_reserved

logger = logging.getLogger(__name__)

RemovePolicy = Literal["reposition", "reject"]


def _reports(operation):
    """Turn a FilesystemError raised by an operation into a failed result."""

    @functools.wraps(operation)
    def wrapper(self: "Filesystem", *args, **kwargs) -> OperationResult:
        try:
            return operation(self, *args, **kwargs)
        except FilesystemError as e:
            logger.debug(f"{operation.__name__} failed: {e.message}")
            return OperationResult.failure(e.kind, e.message)

    return wrapper


def _entry_type(node: Node) -> EntryType:
    return EntryType.FILE if node.is_file else EntryType.DIRECTORY


class Filesystem:
    """In-memory hierarchical filesystem.

    Holds a single root directory and a current-directory cursor that
    relative names are resolved against. Only single-component names are
    accepted; there is no multi-segment path traversal.

    The public operations (touch, mkdir, cd, ls, pwd, rm) report failure
    through OperationResult and never raise FilesystemError.
    """

    def __init__(
        self,
        out: TextIO | None = None,
        remove_policy: RemovePolicy = "reposition",
    ) -> None:
        """Initialize the filesystem with an empty root.

        Args:
            out: Stream that ls and pwd write to (defaults to sys.stdout)
            remove_policy: What rm does when asked to remove the current
                directory or one of its ancestors: "reposition" moves the
                cursor to the nearest surviving ancestor, "reject" fails
        """
        self.out = out
        self.remove_policy = remove_policy
        self.root: Node | None = Node(ROOT, NodeKind.ROOT)
        self.current: Node | None = self.root
        logger.debug("Filesystem created")

    def __enter__(self) -> "Filesystem":
        return self

    def __exit__(self, *exc_info) -> None:
        self.destroy()

    @property
    def closed(self) -> bool:
        return self.root is None

    def _require_open(self) -> Node:
        """Return the current directory, raising if the tree was destroyed."""
        if self.root is None or self.current is None:
            raise FilesystemClosedError()
        return self.current

    def _write(self, lines: list[str]) -> None:
        stream = self.out or sys.stdout
        for line in lines:
            stream.write(f"{line}\n")

    # Lookup

    def resolve(self, name: str) -> Node | None:
        """Find a direct child of the current directory by exact name.

        Args:
            name: Single-component name

        Returns:
            The matching node, or None if not found
        """
        current = self._require_open()
        return current.find_child(name)

    def exists(self, name: str) -> bool:
        """Check if a name exists in the current directory."""
        return self.resolve(name) is not None

    def path_of(self, node: Node) -> str:
        """Absolute path of a node, rebuilt from its parent chain."""
        if node.is_root:
            return SEPARATOR

        names = [node.name]
        names.extend(ancestor.name for ancestor in node.ancestors() if not ancestor.is_root)
        return SEPARATOR + SEPARATOR.join(reversed(names))

    def _contains(self, node: Node) -> bool:
        """Check that a node is still linked into this tree."""
        if node.is_root:
            return node is self.root
        return any(ancestor is self.root for ancestor in node.ancestors())

    def _target(self, name: str) -> Node:
        """Resolve a cd/ls style argument, understanding ``.``, ``..`` and ``/``.

        Raises:
            EntryNotFoundError: If the name is not a child of the current directory
        """
        current = self._require_open()

        if name in ("", CURRENT):
            return current
        if name == PARENT:
            # Root reports itself as its parent
            return current.parent
        if name == ROOT:
            return self.root

        node = current.find_child(name)
        if node is None:
            raise EntryNotFoundError(name)
        return node

    # Creation

    def _create(self, name: str, kind: NodeKind) -> Node:
        node = Node(name, kind)
        self.current.insert_child(node)
        logger.info(f"Created {kind.value} {self.path_of(node)}")
        return node

    @_reports
    def touch(self, name: str) -> OperationResult:
        """Create an empty file in the current directory.

        Reserved names and names that already exist are accepted without
        creating anything.

        Args:
            name: File name

        Returns:
            OperationResult, failed only for malformed names
        """
        self._require_open()

        if is_reserved(name):
            return OperationResult.success()
        if is_malformed(name):
            raise InvalidNameError(name)
        if self.resolve(name) is not None:
            return OperationResult.success()

        self._create(name, NodeKind.FILE)
        return OperationResult.success()

    @_reports
    def mkdir(self, name: str) -> OperationResult:
        """Create a directory in the current directory.

        Args:
            name: Directory name

        Returns:
            OperationResult, failed for reserved, malformed or existing names
        """
        self._require_open()

        if is_reserved(name):
            raise ReservedNameError(name)
        if is_malformed(name):
            raise InvalidNameError(name)
        if self.resolve(name) is not None:
            raise AlreadyExistsError(name)

        self._create(name, NodeKind.DIRECTORY)
        return OperationResult.success()

    # Navigation

    @_reports
    def cd(self, name: str) -> OperationResult:
        """Change the current directory.

        Args:
            name: ``.`` or empty (stay), ``..`` (parent, stays at root),
                ``/`` (root) or the name of a child directory

        Returns:
            OperationResult, failed if the name is missing or names a file
        """
        target = self._target(name)
        if target.is_file:
            raise WrongKindError(name)

        self.current = target
        return OperationResult.success()

    @_reports
    def pwd(self) -> OperationResult:
        """Print the absolute path of the current directory."""
        path = self.path_of(self._require_open())
        self._write([path])
        return OperationResult.success([path])

    # Listing

    def listing(self, name: str = CURRENT) -> DirectoryListing:
        """Describe the entries of a directory, or a single file.

        Args:
            name: Target, resolved the same way as cd

        Returns:
            DirectoryListing with entries in ascending name order

        Raises:
            EntryNotFoundError: If the target does not exist
        """
        target = self._target(name)
        path = self.path_of(target)

        if target.is_file:
            return DirectoryListing(
                path=path,
                entries=[DirectoryEntry(name=target.name, entry_type=EntryType.FILE)],
                total_files=1,
            )

        entries = [
            DirectoryEntry(name=child.name, entry_type=_entry_type(child))
            for child in target.children
        ]
        total_directories = sum(1 for entry in entries if entry.entry_type == EntryType.DIRECTORY)

        return DirectoryListing(
            path=path,
            entries=entries,
            total_files=len(entries) - total_directories,
            total_directories=total_directories,
        )

    @_reports
    def ls(self, name: str = CURRENT) -> OperationResult:
        """Print the contents of a directory, one name per line.

        Directories are printed with a trailing separator. Listing a file
        prints just its name; an empty directory prints nothing.

        Args:
            name: Target, resolved the same way as cd

        Returns:
            OperationResult with the printed lines as output
        """
        lines = self.listing(name).lines()
        self._write(lines)
        return OperationResult.success(lines)

    def tree(self, name: str = CURRENT, max_depth: int | None = None) -> TreeNode:
        """Get a tree snapshot rooted at a directory.

        Args:
            name: Target, resolved the same way as cd
            max_depth: Maximum depth to descend (None for unlimited)

        Returns:
            TreeNode with children in sorted order

        Raises:
            EntryNotFoundError: If the target does not exist
        """
        return self._build_tree(self._target(name), max_depth)

    def _build_tree(self, node: Node, max_depth: int | None) -> TreeNode:
        top = TreeNode(name=node.name, entry_type=_entry_type(node))
        stack = [(node, top, 0)]

        while stack:
            source, snapshot, depth = stack.pop()
            if source.is_file or (max_depth is not None and depth >= max_depth):
                continue
            for child in source.children:
                child_snapshot = TreeNode(name=child.name, entry_type=_entry_type(child))
                snapshot.children.append(child_snapshot)
                stack.append((child, child_snapshot, depth + 1))

        return top

    # Removal

    @_reports
    def rm(self, name: str) -> OperationResult:
        """Remove a file, or a directory together with everything under it.

        Args:
            name: Name of an entry in the current directory

        Returns:
            OperationResult, failed for reserved, malformed or missing names
        """
        self._require_open()

        if is_reserved(name):
            raise ReservedNameError(name)
        if is_malformed(name):
            raise InvalidNameError(name)

        node = self.resolve(name)
        if node is None:
            raise EntryNotFoundError(name)

        self.remove_node(node)
        return OperationResult.success()

    def remove_node(self, node: Node) -> int:
        """Remove a node and its subtree from the tree.

        If the node is the current directory or one of its ancestors, the
        remove policy applies: the cursor moves to the node's parent, or
        BusyError is raised.

        Args:
            node: Non-root node attached to this tree

        Returns:
            Number of nodes destroyed

        Raises:
            ReservedNameError: If node is the root
            EntryNotFoundError: If node was already removed or belongs to another tree
            BusyError: If the policy is "reject" and node contains the cursor
        """
        current = self._require_open()
        if node.is_root:
            raise ReservedNameError(node.name)
        if not self._contains(node):
            raise EntryNotFoundError(node.name)

        holds_cursor = node is current or any(a is node for a in current.ancestors())
        if holds_cursor and self.remove_policy == "reject":
            raise BusyError(node.name)

        path = self.path_of(node)
        parent = node.parent
        count = self._destroy_subtree(node)
        parent.detach_child(node)

        if holds_cursor:
            self.current = parent
            logger.info(f"Current directory moved to {self.path_of(parent)}")

        logger.info(f"Removed {path} ({count} entries)")
        return count

    def _destroy_subtree(self, node: Node) -> int:
        """Destroy all descendants of a node, children before their parent.

        Returns:
            Number of nodes in the subtree, node included
        """
        # Pre-order walk; every node lands after its parent
        order: list[Node] = []
        stack = [node]
        while stack:
            visiting = stack.pop()
            order.append(visiting)
            stack.extend(visiting.children)

        for visiting in reversed(order):
            visiting.detach_children()
        return len(order)

    def destroy(self) -> None:
        """Tear down the whole tree, root included.

        Safe to call more than once; every other operation raises
        FilesystemClosedError afterwards.
        """
        if self.root is None:
            return

        count = self._destroy_subtree(self.root)
        self.root = None
        self.current = None
        logger.info(f"Filesystem destroyed ({count} entries)")


def create_filesystem(
    out: TextIO | None = None,
    remove_policy: RemovePolicy = "reposition",
) -> Filesystem:
    """Create a filesystem containing only the root directory."""
    return Filesystem(out=out, remove_policy=remove_policy)


def destroy_filesystem(filesystem: Filesystem) -> None:
    """Release every node of a filesystem."""
    filesystem.destroy()
