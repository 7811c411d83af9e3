"""Shared fixtures for pyfind tests."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

requires_symlinks = pytest.mark.skipif(
    not hasattr(os, "symlink"), reason="os.symlink is not available"
)


@pytest.fixture
def find_tree(tmp_path: Path) -> Path:
    """Create the standard search tree.

    Structure::

        test-dir/
        ├── DIR3/
        │   └── FiLe1OnE.txT
        ├── dir1/
        │   ├── 4file.txt
        │   ├── fil5e.txt
        │   └── file3.txt
        ├── dir2/
        │   ├── FILE3.txt
        │   ├── file-or-dir/
        │   └── file2.txt
        └── file-or-dir
    """
    root = tmp_path / "test-dir"
    (root / "dir1").mkdir(parents=True)
    (root / "dir1" / "4file.txt").write_text("hi")
    (root / "dir1" / "fil5e.txt").write_text("hi")
    (root / "dir1" / "file3.txt").write_text("hi")
    (root / "dir2").mkdir()
    (root / "dir2" / "file2.txt").write_text("hi")
    (root / "dir2" / "FILE3.txt").write_text("hi")
    (root / "dir2" / "file-or-dir").mkdir()
    (root / "DIR3").mkdir()
    (root / "DIR3" / "FiLe1OnE.txT").write_text("hi")
    (root / "file-or-dir").write_text("hi")
    return root


@pytest.fixture
def cyclic_tree(tmp_path: Path) -> Path:
    """Tree with a symlink pointing back at its own parent directory.

    Structure::

        root/
        ├── a/
        │   ├── loop -> a
        │   ├── notes.txt
        │   └── sub/
        │       └── deep.txt
        └── readme.md
    """
    a = tmp_path / "a"
    (a / "sub").mkdir(parents=True)
    (a / "notes.txt").write_text("notes")
    (a / "sub" / "deep.txt").write_text("deep")
    (tmp_path / "readme.md").write_text("readme")
    os.symlink(a, a / "loop", target_is_directory=True)
    return tmp_path


def relative_paths(paths: list[str], root: Path) -> list[str]:
    """Return *paths* relative to *root*, using ``/`` separators."""
    return [Path(p).relative_to(root).as_posix() for p in paths]


@pytest.fixture
def deep_tree(tmp_path: Path) -> Iterator[Path]:
    """Chain of 1100 nested ``d`` directories with a file at the bottom.

    Removed bottom-up on teardown so cleanup does not recurse either.
    """
    dirs: list[str] = []
    current = str(tmp_path)
    for _ in range(1100):
        current = os.path.join(current, "d")
        os.mkdir(current)
        dirs.append(current)
    leaf = os.path.join(current, "bottom.txt")
    with open(leaf, "w", encoding="utf-8") as fh:
        fh.write("bottom")

    yield tmp_path

    os.remove(leaf)
    for directory in reversed(dirs):
        os.rmdir(directory)
