"""Tests for file system helpers."""

import os
import stat
from collections.abc import Iterator
from pathlib import Path

import pytest

from izanami_cli.utils.file_utils import copy_file


@pytest.fixture
def open_umask() -> Iterator[None]:
    """Let created files keep whatever mode they are opened with."""
    previous = os.umask(0)
    yield
    os.umask(previous)


class TestCopyFile:
    """Tests for copy_file."""

    def test_copies_content_and_mode(self, tmp_path: Path, open_umask: None) -> None:
        src = tmp_path / "config.yaml"
        src.write_text("timeout: 45\n", encoding="utf-8")
        src.chmod(0o600)
        dst = tmp_path / "config.yaml.bak"

        copy_file(src, dst)

        assert dst.read_text(encoding="utf-8") == "timeout: 45\n"
        assert stat.S_IMODE(dst.stat().st_mode) == 0o600

    def test_created_with_source_mode(
        self, tmp_path: Path, open_umask: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        src = tmp_path / "sessions"
        src.write_text("{}", encoding="utf-8")
        src.chmod(0o600)
        dst = tmp_path / "sessions.bak"
        modes: list[int] = []
        real_open = os.open

        def recording_open(path, flags, mode=0o777, *args, **kwargs):
            modes.append(mode)
            return real_open(path, flags, mode, *args, **kwargs)

        monkeypatch.setattr(os, "open", recording_open)

        copy_file(src, dst)

        assert modes == [0o600]

    def test_existing_destination_is_tightened(self, tmp_path: Path) -> None:
        src = tmp_path / "config.yaml"
        src.write_text("new", encoding="utf-8")
        src.chmod(0o600)
        dst = tmp_path / "config.yaml.bak"
        dst.write_text("old contents that are longer", encoding="utf-8")
        dst.chmod(0o644)

        copy_file(src, dst)

        assert dst.read_text(encoding="utf-8") == "new"
        assert stat.S_IMODE(dst.stat().st_mode) == 0o600

    def test_missing_source(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Source file not found"):
            copy_file(tmp_path / "missing", tmp_path / "dst")
