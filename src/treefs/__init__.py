"""treefs - an in-memory hierarchical filesystem with a command shell."""

__version__ = "0.1.0"

from treefs.filesystem import Filesystem, create_filesystem, destroy_filesystem

__all__ = ["__version__", "Filesystem", "create_filesystem", "destroy_filesystem"]
