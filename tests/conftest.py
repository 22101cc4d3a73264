"""
Shared pytest fixtures.

Makes the 'src' directory importable without an installed package and
provides filesystems that write to in-memory streams.
"""

import io
import os
import sys

import pytest
from rich.console import Console

_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from treefs import config as config_module  # noqa: E402
from treefs.filesystem import Filesystem  # noqa: E402


@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def fs(out: io.StringIO) -> Filesystem:
    """Empty filesystem whose ls/pwd output lands in ``out``."""
    filesystem = Filesystem(out=out)
    yield filesystem
    filesystem.destroy()


@pytest.fixture
def console() -> Console:
    """Rich console that records plain text instead of writing to a terminal."""
    return Console(file=io.StringIO(), width=120, color_system=None, highlight=False)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run with no config files, no .env and no TREEFS_ variables in scope."""
    for key in list(os.environ):
        if key.startswith("TREEFS_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_module, "settings", None)
    monkeypatch.setattr(config_module, "_config_file", None)
    return tmp_path
