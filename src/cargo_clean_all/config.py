"""Run configuration assembled from command-line options."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


class ConfigError(Exception):
    """Raised when the run configuration is invalid."""


@dataclass(slots=True)
class CleanAllConfig:
    """Options for a single scan-and-clean run.

    Nothing here is persisted; every run starts from the defaults and
    whatever was passed on the command line.
    """

    root_dir: Path = Path(".")
    yes: bool = False
    keep_size: int = 0
    keep_days: int = 0
    dry_run: bool = False
    threads: int = 0
    verbose: bool = False
    ignore: list[Path] = field(default_factory=list)
    skip: list[Path] = field(default_factory=list)
    keep_executables: bool = False
    interactive: bool = False
    max_depth: int = 0

    def validate(self) -> None:
        """Check the options before anything touches the filesystem.

        Raises:
            ConfigError: On the first invalid option.
        """
        if self.keep_size < 0:
            raise ConfigError(f"Keep size must not be negative: {self.keep_size}")
        if self.keep_days < 0:
            raise ConfigError(f"Keep days must not be negative: {self.keep_days}")
        if self.threads < 0:
            raise ConfigError(f"Thread count must not be negative: {self.threads}")
        if self.max_depth < 0:
            raise ConfigError(f"Max depth must not be negative: {self.max_depth}")
        if not self.root_dir.is_dir():
            raise ConfigError(f"Not a directory: {self.root_dir}")
