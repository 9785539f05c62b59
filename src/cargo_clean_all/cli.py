"""CLI interface for cargo-clean-all."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Sequence

import click

from cargo_clean_all import __version__
from cargo_clean_all.config import CleanAllConfig, ConfigError
from cargo_clean_all.core.classifier import best_effort_canonical
from cargo_clean_all.core.discovery import DiscoveryError
from cargo_clean_all.core.engine import CleanAllEngine
from cargo_clean_all.core.selection import selected_indices
from cargo_clean_all.models.clean_result import CleanupReport
from cargo_clean_all.models.project import ProjectAnalysis
from cargo_clean_all.utils import bytes_to_human, format_timestamp, parse_bytes, pretty_format_path

# Cargo runs ``cargo-clean-all clean-all <args>`` for ``cargo clean-all <args>``.
_CARGO_SUBCOMMAND = "clean-all"


class ByteSize(click.ParamType):
    """Size option accepting values like ``500MB``, ``1KiB`` or ``1024``."""

    name = "size"

    def convert(self, value, param, ctx) -> int:
        if isinstance(value, int):
            return value
        try:
            return parse_bytes(value)
        except ValueError as exc:
            self.fail(str(exc), param, ctx)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _report_access_error(path: Path, error: OSError) -> None:
    click.echo(f"Error accessing '{path}': {error}", err=True)


def format_project(project: ProjectAnalysis) -> str:
    """One-line description: ``name: size (last modified), path``."""
    path = pretty_format_path(best_effort_canonical(project.project_path))
    return (
        f"{click.style(project.name, bold=True)}: {bytes_to_human(project.size)} "
        f"({format_timestamp(project.last_modified)}), {path}"
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("root_dir", default=".", metavar="DIR", type=click.Path(path_type=Path))
@click.option("--yes", "-y", is_flag=True,
              help="Don't ask for confirmation; clean all projects not excluded by other constraints")
@click.option("--keep-size", "-s", type=ByteSize(), default="0", metavar="SIZE",
              help='Keep projects whose target dir is not larger than SIZE, e.g. "500MB" or "1GiB"')
@click.option("--keep-days", "-d", type=click.IntRange(min=0), default=0, metavar="DAYS",
              help="Keep projects that have been compiled in the last DAYS days")
@click.option("--dry-run", is_flag=True, help="List the cleanable projects and freeable space, delete nothing")
@click.option("--threads", "-t", type=click.IntRange(min=0), default=0, metavar="THREADS",
              help="Number of threads used for scanning; 0 uses one per CPU")
@click.option("-v", "--verbose", count=True, help="Show access errors while scanning (-vv for debug logs)")
@click.option("--ignore", multiple=True, type=click.Path(path_type=Path),
              help="Keep projects in this directory and its subdirectories by default (repeatable)")
@click.option("--skip", multiple=True, type=click.Path(path_type=Path),
              help="Don't scan this directory and its subdirectories at all (repeatable)")
@click.option("--keep-executable", "-e", "keep_executables", is_flag=True,
              help="Move built executables to <project>/executables before cleaning")
@click.option("--interactive", "-i", is_flag=True, help="Choose the projects to clean from a list")
@click.option("--depth", "max_depth", type=click.IntRange(min=0), default=0, metavar="DEPTH",
              help="Maximum directory depth to scan; 0 is unlimited")
@click.version_option(__version__, "-V", "--version", prog_name="cargo-clean-all")
def main(
    root_dir: Path,
    yes: bool,
    keep_size: int,
    keep_days: int,
    dry_run: bool,
    threads: int,
    verbose: int,
    ignore: tuple[Path, ...],
    skip: tuple[Path, ...],
    keep_executables: bool,
    interactive: bool,
    max_depth: int,
) -> None:
    """Find Cargo projects below DIR and clean their target directories."""
    _setup_logging(verbose)

    config = CleanAllConfig(
        root_dir=root_dir,
        yes=yes,
        keep_size=keep_size,
        keep_days=keep_days,
        dry_run=dry_run,
        threads=threads,
        verbose=verbose > 0,
        ignore=list(ignore),
        skip=list(skip),
        keep_executables=keep_executables,
        interactive=interactive,
        max_depth=max_depth,
    )
    try:
        config.validate()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    engine = CleanAllEngine(config, on_error=_report_access_error if config.verbose else None)

    def on_progress(phase: str, status: str) -> None:
        if status == "scanning":
            click.echo("Scanning for projects...", err=True)
        elif status != "done":
            click.echo(f"  {status}", err=True)

    try:
        projects = engine.scan(on_progress=on_progress)
    except DiscoveryError as exc:
        raise click.ClickException(str(exc)) from exc

    if not projects:
        click.echo("No Cargo projects with a target directory found.")
        return

    defaults = engine.preselect(projects)
    if config.interactive:
        indices = _interactive_select(projects, defaults)
        if indices is None:
            click.echo("Nothing selected")
            return
    else:
        indices = selected_indices(defaults)

    selected, kept = engine.select(projects, indices)
    will_free = sum(p.size for p in selected)
    keeping = sum(p.size for p in kept)

    click.echo("Ignoring the following project directories:")
    for project in kept:
        click.echo(format_project(project))

    click.echo("\nSelected the following project directories for cleaning:")
    for project in selected:
        click.echo(format_project(project))

    click.echo(
        f"\nSelected {len(selected)}/{len(projects)} projects, cleaning will free: "
        f"{click.style(bytes_to_human(will_free), bold=True)}. Keeping: {bytes_to_human(keeping)}"
    )

    if not selected:
        click.echo("Nothing to clean.")
        return

    if config.dry_run:
        click.echo("Dry run. Not doing any cleanup")
        return

    if not config.yes and not click.confirm("Clean the project directories shown above?"):
        click.echo("Cleanup cancelled")
        return

    click.echo("Starting cleanup...")
    with click.progressbar(length=len(selected), label="Deleting target directories") as bar:
        report = engine.clean(selected, on_progress=lambda project, index, total: bar.update(1))

    _print_report(report, config.keep_executables)


def _print_report(report: CleanupReport, keep_executables: bool) -> None:
    for outcome in report.outcomes:
        for error in outcome.preserve_errors:
            click.echo(f"  {click.style('!', fg='yellow')} Could not preserve executable {error}")

    if keep_executables:
        preserved = sum(len(o.preserved) for o in report.outcomes)
        click.echo(f"Preserved {preserved} executable{'s' if preserved != 1 else ''}")

    reclaimed = click.style(bytes_to_human(report.reclaimed_bytes), bold=True)
    failed = report.failed
    if not failed:
        click.echo(f"All projects cleaned. Reclaimed {reclaimed} of disk space")
        return

    click.echo(f"\n{len(failed)} of {len(report.outcomes)} projects could not be cleaned:")
    for outcome in failed:
        click.echo(
            f"  {click.style('✗', fg='red')} {pretty_format_path(outcome.project_path)} "
            f"({bytes_to_human(outcome.expected_bytes)}): {outcome.error}"
        )
    click.echo(
        f"\nReclaimed approximately {reclaimed} of disk space. Failed deletions are not "
        "counted, although they may have removed part of their directory."
    )


def parse_index_list(raw: str, count: int) -> set[int]:
    """Parse ``"1,3-5"`` into zero-based indices below *count*.

    Raises:
        ValueError: On malformed or out-of-range numbers.
    """
    indices: set[int] = set()
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        start, sep, end = part.partition("-")
        if not start.strip().isdigit() or (sep and not end.strip().isdigit()):
            raise ValueError(f"not a number or range: {part!r}")
        first = int(start)
        last = int(end) if sep else first
        if first > last:
            first, last = last, first
        if first < 1 or last > count:
            raise ValueError(f"{part!r} is outside 1-{count}")
        indices.update(range(first - 1, last))
    return indices


def _interactive_select(projects: Sequence[ProjectAnalysis], defaults: Sequence[bool]) -> list[int] | None:
    """Let the user toggle which projects to clean.

    Returns the chosen indices, or None if the user cancelled.
    """
    chosen = set(selected_indices(defaults))
    while True:
        click.echo("\nSelect projects to clean:\n")
        for i, project in enumerate(projects):
            mark = click.style("[x]", fg="green") if i in chosen else "[ ]"
            click.echo(f"  {mark} {i + 1:>3}. {format_project(project)}")
        click.echo()
        raw = click.prompt(
            "Toggle numbers (e.g. 1,3-5), 'a' all, 'n' none, Enter to confirm, 'q' to cancel",
            default="",
            show_default=False,
        )
        match raw.strip().lower():
            case "":
                return sorted(chosen)
            case "q":
                return None
            case "a":
                chosen = set(range(len(projects)))
            case "n":
                chosen.clear()
            case text:
                try:
                    chosen ^= parse_index_list(text, len(projects))
                except ValueError as exc:
                    click.echo(f"Invalid selection: {exc}")


def run(argv: Sequence[str] | None = None) -> None:
    """Console entry point that also works as ``cargo clean-all``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if args[:1] == [_CARGO_SUBCOMMAND]:
        args = args[1:]
    main.main(args=args, prog_name="cargo-clean-all")
