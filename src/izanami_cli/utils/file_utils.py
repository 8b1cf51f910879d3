"""File system utilities for izanami-cli."""

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def ensure_dir(path: Path, mode: int | None = None) -> None:
    """Create a directory and its parents; ``mode`` applies only on creation."""
    if path.exists():
        return
    if mode is None:
        path.mkdir(parents=True, exist_ok=True)
    else:
        path.mkdir(mode=mode, parents=True, exist_ok=True)


def file_exists(path: Path) -> bool:
    return path.exists() and path.is_file()


def read_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML document; an empty file reads as an empty mapping.

    Raises:
        FileNotFoundError: If the file is missing
        yaml.YAMLError: If the content does not parse
    """
    if not path.exists():
        raise FileNotFoundError(path)

    with path.open(encoding="utf-8") as stream:
        data = yaml.safe_load(stream)
    return data or {}


def write_yaml(
    path: Path,
    data: dict[str, Any],
    mode: int | None = None,
    dir_mode: int | None = None,
) -> None:
    """Write data to YAML file.

    Args:
        path: Path to YAML file
        data: Data to write
        mode: Permission bits enforced on the file after writing
        dir_mode: Permission bits for a freshly created parent directory
    """
    ensure_dir(path.parent, dir_mode)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(
            data,
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
    if mode is not None:
        path.chmod(mode)
    logger.debug("Wrote %s", path)


def write_file(path: Path, content: str, mode: int | None = None) -> None:
    """Write text, then chmod to ``mode`` when given."""
    ensure_dir(path.parent)
    path.write_text(content, encoding="utf-8")
    if mode is not None:
        path.chmod(mode)


def copy_file(src: Path, dst: Path) -> None:
    """Copy a file, keeping its permission bits.

    Raises:
        FileNotFoundError: If source file doesn't exist
    """
    if not src.exists():
        raise FileNotFoundError(f"Source file not found: {src}")

    mode = stat.S_IMODE(src.stat().st_mode)
    # Created with the source mode so the copy is never readable beyond it
    fd = os.open(dst, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "wb") as target, src.open("rb") as source:
        shutil.copyfileobj(source, target)
    dst.chmod(mode)


def delete_file(path: Path) -> bool:
    """Remove a file; returns False when there was nothing to remove."""
    if not path.exists():
        return False

    path.unlink()
    return True


def repair_permissions(path: Path, mode: int) -> bool:
    """Tighten a file's permission bits to ``mode`` when they are looser.

    Returns:
        True if the permissions were changed
    """
    if not path.exists():
        return False

    current = stat.S_IMODE(path.stat().st_mode)
    if current & ~mode == 0:
        return False

    path.chmod(mode)
    logger.debug("Repaired permissions on %s (%o -> %o)", path, current, mode)
    return True
