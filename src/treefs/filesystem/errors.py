"""Exceptions raised by filesystem operations."""

from treefs.filesystem.models import ErrorKind


class FilesystemError(Exception):
    """Base class for recoverable filesystem errors.

    The tree is left unchanged whenever one of these is raised.
    """

    kind: ErrorKind

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name
        self.message = message


class InvalidNameError(FilesystemError):
    """Name is empty or contains the path separator."""

    kind = ErrorKind.INVALID_NAME

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Invalid name: {name!r}")


class ReservedNameError(FilesystemError):
    """Name is reserved for navigation and cannot name an entry."""

    kind = ErrorKind.RESERVED_NAME

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Reserved name: {name!r}")


class AlreadyExistsError(FilesystemError):
    """An entry with the same name already exists."""

    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Already exists: {name}")


class EntryNotFoundError(FilesystemError):
    """No entry with the given name in the resolution scope."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, name: str) -> None:
        super().__init__(name, f"No such file or directory: {name}")


class WrongKindError(FilesystemError):
    """A directory was required but a file was found."""

    kind = ErrorKind.WRONG_KIND

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Not a directory: {name}")


class BusyError(FilesystemError):
    """The entry is the current directory or one of its ancestors."""

    kind = ErrorKind.BUSY

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Directory in use: {name}")


class FilesystemClosedError(RuntimeError):
    """Operation attempted on a filesystem that has been destroyed."""

    def __init__(self) -> None:
        super().__init__("Filesystem has been destroyed")
