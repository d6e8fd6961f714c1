"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

MB = 1024 * 1024

MakeFile = Callable[[Path, int], Path]


def _write_file(path: Path, size: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path_factory: pytest.TempPathFactory, monkeypatch) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory so user config never leaks in."""
    config_home = tmp_path_factory.mktemp("xdg-config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def make_file() -> MakeFile:
    """Return a helper that creates a file of a given size, parents included."""
    return _write_file


@pytest.fixture
def project_tree(tmp_path: Path) -> Path:
    """Build a small project with dependency and build folders.

    Layout (under <tmp>/project):
        a/node_modules/      5 files, 2 MB total
        a/b/target/          1 file, 50 KB
        a/.git/              repository data, with a nested node_modules
        a/src/main.py        regular source
    """
    base = tmp_path / "project"
    modules = base / "a" / "node_modules"
    for i in range(5):
        _write_file(modules / f"pkg{i}" / "index.js", 2 * MB // 5)
    _write_file(base / "a" / "b" / "target" / "app.bin", 50 * 1024)
    _write_file(base / "a" / ".git" / "objects" / "pack.idx", 1024)
    _write_file(base / "a" / ".git" / "hooks" / "node_modules" / "hook.js", 2 * MB)
    _write_file(base / "a" / "src" / "main.py", 100)
    return base
