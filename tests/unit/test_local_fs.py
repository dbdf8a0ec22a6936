# tests/unit/test_local_fs.py
import logging
import os
from pathlib import Path

import pytest

from dupescan.adapters.filesystem.local_fs import LocalFS


def _tree(root: Path) -> None:
    (root / "b").mkdir(parents=True)
    (root / "a").mkdir()
    (root / "z.txt").write_text("z")
    (root / "b" / "2.txt").write_text("2")
    (root / "b" / "1.txt").write_text("1")
    (root / "a" / "deep").mkdir()
    (root / "a" / "deep" / "x.txt").write_text("x")


def test_walk_recurses_and_is_sorted(tmp_path: Path):
    _tree(tmp_path)
    got = [p.relative_to(tmp_path).as_posix() for p in LocalFS().walk(tmp_path)]
    assert got == ["z.txt", "a/deep/x.txt", "b/1.txt", "b/2.txt"]


def test_walk_is_stable_across_calls(tmp_path: Path):
    _tree(tmp_path)
    fs = LocalFS()
    assert list(fs.walk(tmp_path)) == list(fs.walk(tmp_path))


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_walk_skips_symlinks(tmp_path: Path):
    real = tmp_path / "real.txt"
    real.write_text("data")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "inner.txt").write_text("inner")
    try:
        (tmp_path / "link.txt").symlink_to(real)
        (tmp_path / "linkdir").symlink_to(sub, target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    got = {p.relative_to(tmp_path).as_posix() for p in LocalFS().walk(tmp_path)}
    assert got == {"real.txt", "sub/inner.txt"}


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="FIFOs unsupported")
def test_walk_skips_special_files(tmp_path: Path):
    (tmp_path / "plain.txt").write_text("p")
    os.mkfifo(tmp_path / "pipe")
    got = [p.name for p in LocalFS().walk(tmp_path)]
    assert got == ["plain.txt"]


def test_walk_of_a_file_yields_that_file(tmp_path: Path):
    f = tmp_path / "only.txt"
    f.write_text("1")
    assert list(LocalFS().walk(f)) == [f]


def test_walk_warns_when_root_cannot_be_listed(tmp_path: Path, caplog):
    missing = tmp_path / "gone"
    with caplog.at_level(logging.WARNING):
        assert list(LocalFS().walk(missing)) == []
    assert "Could not list directory" in caplog.text
    assert "gone" in caplog.text


@pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="needs a non-root POSIX user",
)
def test_walk_warns_and_continues_past_unreadable_subdir(tmp_path: Path, caplog):
    (tmp_path / "ok.txt").write_text("ok")
    locked = tmp_path / "locked"
    locked.mkdir()
    (locked / "hidden.txt").write_text("h")
    locked.chmod(0)
    try:
        with caplog.at_level(logging.WARNING):
            got = [p.name for p in LocalFS().walk(tmp_path)]
    finally:
        locked.chmod(0o755)
    assert got == ["ok.txt"]
    assert "Could not list directory" in caplog.text
    assert "locked" in caplog.text
