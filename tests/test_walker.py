"""Tests for the scandir-based walk adapter."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest
from conftest import can_symlink

from ripzip.app.adapters import ScandirWalker


def _relative(entries, root: Path) -> list[tuple[str, int, bool]]:
    return [
        ("/".join(entry.path.relative_to(root).parts), entry.depth, entry.is_file)
        for entry in entries
    ]


def test_walk_yields_root_then_sorted_children(docs_dir: Path) -> None:
    entries = list(ScandirWalker().walk(docs_dir, max_depth=100))

    assert entries[0].path == docs_dir
    assert entries[0].depth == 0
    assert not entries[0].is_file
    assert _relative(entries[1:], docs_dir) == [
        ("a.txt", 1, True),
        ("sub", 1, False),
        ("sub/b.txt", 2, True),
    ]


def test_walk_respects_max_depth(temp_dir: Path) -> None:
    root = temp_dir / "root"
    (root / "one" / "two" / "three").mkdir(parents=True)
    (root / "one" / "two" / "three" / "deep.txt").write_text("deep")

    entries = list(ScandirWalker().walk(root, max_depth=2))

    assert _relative(entries[1:], root) == [
        ("one", 1, False),
        ("one/two", 2, False),
    ]


def test_walk_is_restartable(nested_files: Path) -> None:
    walker = ScandirWalker()

    first = list(walker.walk(nested_files, max_depth=100))
    second = list(walker.walk(nested_files, max_depth=100))

    assert first == second


def test_walk_does_not_follow_symlinks(temp_dir: Path) -> None:
    if not can_symlink(temp_dir):
        pytest.skip("Symlinks are not supported on this platform")

    root = temp_dir / "root"
    root.mkdir()
    (root / "file.txt").write_text("x")
    (root / "loop").symlink_to(root, target_is_directory=True)
    (root / "link.txt").symlink_to(root / "file.txt")

    entries = list(ScandirWalker().walk(root, max_depth=100))

    assert _relative(entries[1:], root) == [
        ("file.txt", 1, True),
        ("link.txt", 1, False),
        ("loop", 1, False),
    ]


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="Named pipes need POSIX")
def test_special_files_are_not_regular(temp_dir: Path) -> None:
    root = temp_dir / "root"
    root.mkdir()
    os.mkfifo(root / "pipe")
    (root / "file.txt").write_text("x")

    entries = list(ScandirWalker().walk(root, max_depth=100))

    assert _relative(entries[1:], root) == [
        ("file.txt", 1, True),
        ("pipe", 1, False),
    ]


def test_walk_missing_root_raises(temp_dir: Path) -> None:
    with pytest.raises(FileNotFoundError):
        list(ScandirWalker().walk(temp_dir / "missing", max_depth=100))


def _pretend_root_is_another_device(monkeypatch: pytest.MonkeyPatch, root: Path) -> None:
    """Make every child of ``root`` look like it lives on a different filesystem."""
    real_stat = os.stat

    def fake_stat(path, *args, **kwargs):
        result = real_stat(path, *args, **kwargs)
        if Path(path) == root:
            return SimpleNamespace(st_mode=result.st_mode, st_dev=result.st_dev + 1)
        return result

    monkeypatch.setattr(os, "stat", fake_stat)


@pytest.fixture
def mount_tree(temp_dir: Path) -> Path:
    root = temp_dir / "root"
    (root / "mounted").mkdir(parents=True)
    (root / "mounted" / "inner.txt").write_text("x")
    (root / "top.txt").write_text("x")
    return root


def test_walk_does_not_cross_filesystem_boundary(
    mount_tree: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _pretend_root_is_another_device(monkeypatch, mount_tree)

    entries = list(ScandirWalker().walk(mount_tree, max_depth=100))
    monkeypatch.undo()

    assert _relative(entries[1:], mount_tree) == [
        ("mounted", 1, False),
        ("top.txt", 1, True),
    ]


def test_walk_crosses_filesystems_when_allowed(
    mount_tree: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _pretend_root_is_another_device(monkeypatch, mount_tree)

    entries = list(ScandirWalker().walk(mount_tree, max_depth=100, same_file_system=False))
    monkeypatch.undo()

    assert _relative(entries[1:], mount_tree) == [
        ("mounted", 1, False),
        ("mounted/inner.txt", 2, True),
        ("top.txt", 1, True),
    ]


@pytest.mark.skipif(sys.platform != "linux", reason="Needs long path support")
def test_walk_deeper_than_recursion_limit(temp_dir: Path) -> None:
    depth = sys.getrecursionlimit() + 100
    if len(str(temp_dir)) + 2 * depth > 4000:
        pytest.skip("Tree would exceed the path length limit")

    root = temp_dir / "deep"
    root.mkdir()
    directories = []
    current = root
    for _ in range(depth):
        current = current / "d"
        current.mkdir()
        directories.append(current)
    bottom = current / "bottom.txt"
    bottom.write_text("x")

    try:
        entries = list(ScandirWalker().walk(root, max_depth=depth + 1))
    finally:
        # Remove bottom-up; recursive removal would hit the same limit.
        bottom.unlink()
        for directory in reversed(directories):
            directory.rmdir()

    assert entries[-1].path == bottom
    assert entries[-1].depth == depth + 1
    assert entries[-1].is_file
