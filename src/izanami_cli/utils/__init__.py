"""Utility helpers for izanami-cli."""

from izanami_cli.utils.console import (
    build_console,
    print_error,
    print_info,
    print_panel,
    print_plain,
    print_success,
    print_warning,
)
from izanami_cli.utils.file_utils import (
    copy_file,
    delete_file,
    ensure_dir,
    file_exists,
    read_yaml,
    repair_permissions,
    write_file,
    write_yaml,
)

__all__ = [
    "build_console",
    "copy_file",
    "delete_file",
    "ensure_dir",
    "file_exists",
    "print_error",
    "print_info",
    "print_panel",
    "print_plain",
    "print_success",
    "print_warning",
    "read_yaml",
    "repair_permissions",
    "write_file",
    "write_yaml",
]
