"""izanami-cli: command-line client for the Izanami feature-flag service."""

import tomllib
from pathlib import Path

try:
    # Development checkout: read the version straight from pyproject.toml
    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    with open(pyproject_path, "rb") as f:
        data = tomllib.load(f)
    __version__ = data["project"]["version"]
except (OSError, KeyError, tomllib.TOMLDecodeError):
    try:
        from importlib.metadata import PackageNotFoundError, version

        __version__ = version("izanami-cli")
    except PackageNotFoundError:
        __version__ = "0.0.0-dev"
