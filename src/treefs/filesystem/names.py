"""Name classification for filesystem entries."""

SEPARATOR = "/"
CURRENT = "."
PARENT = ".."
ROOT = SEPARATOR

RESERVED_NAMES = frozenset({CURRENT, PARENT, ROOT})


def is_reserved(name: str) -> bool:
    """Check if a name is one of the navigation names ``.``, ``..`` or ``/``."""
    return name in RESERVED_NAMES


def is_malformed(name: str) -> bool:
    """Check if a name cannot be a single path component.

    Args:
        name: Candidate entry name

    Returns:
        True if the name is empty or contains the path separator
    """
    return not name or SEPARATOR in name
