# tests/test_filesystem_remove.py
import pytest

from treefs.filesystem import (
    BusyError,
    EntryNotFoundError,
    ErrorKind,
    Filesystem,
    FilesystemClosedError,
    ReservedNameError,
    destroy_filesystem,
)


def _names(node):
    return [child.name for child in node.children]


def _build_nested(fs):
    fs.mkdir("a")
    fs.cd("a")
    fs.mkdir("b")
    fs.cd("b")
    fs.mkdir("c")
    fs.cd("c")
    fs.touch("leaf")
    fs.cd("/")


# -----------------------------------------------------------------------------
# 1. rm
# -----------------------------------------------------------------------------

def test_rm_file(fs):
    fs.touch("a")
    fs.touch("b")

    assert fs.rm("a")
    assert _names(fs.root) == ["b"]


def test_rm_directory_removes_all_descendants(fs):
    _build_nested(fs)
    a = fs.root.find_child("a")
    b = a.find_child("b")
    c = b.find_child("c")

    assert fs.rm("a")

    assert fs.root.children == []
    # Destroyed nodes are unlinked from both directions
    for node in (a, b, c):
        assert node.children == []
        assert node.parent is None


def test_rm_first_middle_and_last_sibling_relinks_neighbours(fs):
    for name in ["a", "b", "c", "d", "e"]:
        fs.touch(name)

    fs.rm("a")
    assert fs.root.children_head.name == "b"
    assert fs.root.children_head.prev is None

    fs.rm("c")
    b = fs.root.find_child("b")
    d = fs.root.find_child("d")
    assert b.next is d
    assert d.prev is b

    fs.rm("e")
    assert d.next is None
    assert _names(fs.root) == ["b", "d"]


def test_rm_missing_name_fails(fs):
    fs.touch("x")
    result = fs.rm("y")

    assert result.error is ErrorKind.NOT_FOUND
    assert _names(fs.root) == ["x"]


@pytest.mark.parametrize("name", [".", "..", "/"])
def test_rm_reserved_name_fails(fs, name):
    fs.mkdir("a")
    result = fs.rm(name)

    assert result.error is ErrorKind.RESERVED_NAME
    assert _names(fs.root) == ["a"]


@pytest.mark.parametrize("name", ["", "a/b"])
def test_rm_malformed_name_fails(fs, name):
    fs.mkdir("a")
    result = fs.rm(name)

    assert result.error is ErrorKind.INVALID_NAME
    assert _names(fs.root) == ["a"]


def test_rm_only_sees_children_of_current(fs):
    _build_nested(fs)
    fs.cd("a")

    assert not fs.rm("c")
    assert fs.rm("b")
    assert fs.current.name == "a"
    assert fs.current.children == []


def test_name_can_be_reused_after_removal(fs):
    fs.mkdir("x")
    fs.rm("x")

    assert fs.touch("x")
    assert fs.resolve("x").is_file


# -----------------------------------------------------------------------------
# 2. Removing the directory that holds the cursor
# -----------------------------------------------------------------------------

def test_remove_node_ancestor_of_current_repositions_cursor(fs):
    _build_nested(fs)
    fs.cd("a")
    fs.cd("b")
    fs.cd("c")
    a = fs.root.find_child("a")
    b = a.find_child("b")

    count = fs.remove_node(b)

    assert count == 3
    assert fs.current is a
    assert a.children == []


def test_remove_node_current_directory_repositions_to_parent(fs, out):
    _build_nested(fs)
    fs.cd("a")
    fs.cd("b")

    fs.remove_node(fs.current)
    fs.pwd()

    assert out.getvalue() == "/a\n"


def test_remove_node_with_reject_policy_raises_busy(out):
    fs = Filesystem(out=out, remove_policy="reject")
    _build_nested(fs)
    fs.cd("a")
    fs.cd("b")
    a = fs.root.find_child("a")

    with pytest.raises(BusyError):
        fs.remove_node(a)

    assert fs.current.name == "b"
    assert _names(fs.root) == ["a"]


def test_remove_node_rejects_root(fs):
    with pytest.raises(ReservedNameError):
        fs.remove_node(fs.root)


def test_remove_node_twice_raises_not_found(fs):
    _build_nested(fs)
    fs.touch("z")
    a = fs.root.find_child("a")

    assert fs.remove_node(a) == 4

    with pytest.raises(EntryNotFoundError):
        fs.remove_node(a)
    assert _names(fs.root) == ["z"]
    assert fs.current is fs.root


def test_remove_node_from_another_filesystem_raises_not_found(fs, out):
    other = Filesystem(out=out)
    other.mkdir("a")
    fs.mkdir("a")
    foreign = other.root.find_child("a")

    with pytest.raises(EntryNotFoundError):
        fs.remove_node(foreign)
    assert _names(fs.root) == ["a"]
    assert _names(other.root) == ["a"]
    other.destroy()


# -----------------------------------------------------------------------------
# 3. Teardown
# -----------------------------------------------------------------------------

def test_destroy_releases_every_node(out):
    fs = Filesystem(out=out)
    _build_nested(fs)
    root = fs.root
    a = root.find_child("a")

    destroy_filesystem(fs)

    assert fs.closed
    assert fs.root is None
    assert fs.current is None
    assert root.children == []
    assert a.children == []


def test_destroy_twice_is_a_noop(fs):
    fs.destroy()
    fs.destroy()

    assert fs.closed


def test_operations_after_destroy_raise(fs):
    fs.destroy()

    with pytest.raises(FilesystemClosedError):
        fs.touch("x")
    with pytest.raises(FilesystemClosedError):
        fs.pwd()


def test_context_manager_destroys_on_exit(out):
    with Filesystem(out=out) as fs:
        fs.mkdir("tmp")

    assert fs.closed


# -----------------------------------------------------------------------------
# 4. Deep trees
# -----------------------------------------------------------------------------

DEEP = 1500


def _build_deep(fs):
    for i in range(DEEP):
        assert fs.mkdir(f"d{i}")
        assert fs.cd(f"d{i}")


def test_deep_tree_pwd_rm_and_destroy(out):
    fs = Filesystem(out=out)
    _build_deep(fs)

    result = fs.pwd()
    assert result
    assert result.output == ["/" + "/".join(f"d{i}" for i in range(DEEP))]

    fs.cd("/")
    assert fs.rm("d0")
    assert fs.root.children == []

    _build_deep(fs)
    fs.destroy()
    assert fs.closed


def test_deep_tree_snapshot_renders(out):
    fs = Filesystem(out=out)
    _build_deep(fs)
    fs.cd("/")

    rendered = fs.tree("/").to_string().splitlines()

    assert len(rendered) == DEEP + 1
    assert rendered[-1].endswith(f"└── d{DEEP - 1}/")
    fs.destroy()
