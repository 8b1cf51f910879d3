"""Invocation context for configuration resolution.

One InvocationContext is built per command execution by the CLI callback and
passed to every resolver, mutator and diagnostics function. Nothing about the
current invocation is kept in module-level state.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from izanami_cli.config.messages import ERROR_MESSAGES
from izanami_cli.config.paths import get_config_path, get_sessions_path
from izanami_cli.exceptions import AmbiguousInputError


@dataclass
class FlagValues:
    """Values of the global flags, explicitly set or not."""

    url: str = ""
    tenant: str = ""
    project: str = ""
    context: str = ""
    timeout: int = 0
    insecure: bool = False
    profile: str = ""


@dataclass
class InvocationContext:
    """State of a single command invocation.

    Example:
        >>> ctx = InvocationContext(
        ...     config_path=tmp / "config.yaml",
        ...     sessions_path=tmp / ".izsessions",
        ...     flags=FlagValues(tenant="acme"),
        ...     flags_set=frozenset({"tenant"}),
        ... )
        >>> ctx.flag_changed("tenant")
        True
    """

    config_path: Path = field(default_factory=get_config_path)
    sessions_path: Path = field(default_factory=get_sessions_path)

    flags: FlagValues = field(default_factory=FlagValues)
    # Names of flags given on the command line, e.g. {"url", "tenant"}
    flags_set: frozenset[str] = frozenset()

    # Snapshot of the environment taken when the context is built
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))

    verbose: bool = False
    quiet: bool = False

    console: Console = field(default_factory=Console)
    err_console: Console = field(default_factory=lambda: Console(stderr=True))

    def flag_changed(self, name: str) -> bool:
        """Whether a flag was explicitly given, as opposed to left at its default."""
        return name in self.flags_set

    def getenv(self, name: str) -> str:
        return self.environ.get(name, "")

    @property
    def profile_from_flag(self) -> bool:
        """Whether --profile selected the profile for this invocation."""
        return self.flag_changed("profile") and bool(self.flags.profile)


def validate_output_flags(*, verbose: bool, quiet: bool) -> None:
    """Reject --quiet together with --verbose.

    Raises:
        AmbiguousInputError: If both flags are set
    """
    if verbose and quiet:
        raise AmbiguousInputError(ERROR_MESSAGES["quiet_verbose_exclusive"])
