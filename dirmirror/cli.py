"""CLI interface for dirmirror."""

import logging
from pathlib import Path
from typing import Any, Optional

import click

from .config import DEFAULTS, config
from .exceptions import DirMirrorConfigError, DirMirrorError
from .output import OutputFormatter
from .sync import MirrorEngine, SyncStrategy
from .sync.report import (
    build_diff_tree,
    diff_to_dict,
    diff_to_rows,
    operations_to_rows,
    summarize_diff,
)

logger = logging.getLogger(__name__)


@click.group()
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.option(
    "--no-commit",
    is_flag=True,
    help="Only show and log the planned operations, never change any files",
)
@click.version_option(package_name="dirmirror")
@click.pass_context
def main(ctx: Any, quiet: bool, json: bool, verbose: bool, no_commit: bool) -> None:
    """dirmirror - Compare and mirror directory trees."""
    # Store settings in context for subcommands to access
    ctx.ensure_object(dict)
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["verbose"] = verbose
    ctx.obj["no_commit"] = no_commit

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("dirmirror").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(
            level=logging.INFO if no_commit else logging.WARNING,
            format="%(levelname)s: %(message)s",
        )


def _load_engine(out: OutputFormatter) -> MirrorEngine:
    """Create an engine using the persistent configuration."""
    config.load()
    return MirrorEngine(out, config=config)


@main.command()
@click.option(
    "--base-path",
    "-b",
    required=True,
    type=click.Path(path_type=Path),
    help="Reference directory",
)
@click.option(
    "--target-path",
    "-t",
    required=True,
    type=click.Path(path_type=Path),
    help="Directory compared against the base",
)
@click.option("--table", is_flag=True, help="Show a flat table instead of a tree")
@click.option("--show-same", is_flag=True, help="Also list unchanged entries")
@click.pass_context
def compare(
    ctx: Any, base_path: Path, target_path: Path, table: bool, show_same: bool
) -> None:
    """Show the differences between two directory trees.

    Entries are marked relative to the base directory:

    \b
      + missing  only in base
      - new      only in target
      ~ changed  in both, contents differ
      = same     in both, identical

    Examples:
        dirmirror compare -b ./photos -t /mnt/backup/photos
        dirmirror --json compare -b ./docs -t ./docs-copy
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        engine = _load_engine(out)
        diff = engine.compare(base_path, target_path)
    except KeyboardInterrupt:
        out.warning("\nComparison cancelled by user")
        ctx.exit(130)
        return
    except (DirMirrorError, ValueError) as e:
        out.error(str(e))
        ctx.exit(1)
        return

    summary = summarize_diff(diff)

    if out.json_output:
        out.output_json(
            {
                "base": str(base_path),
                "target": str(target_path),
                "unchanged": diff.unchanged(),
                "summary": summary,
                "diff": diff_to_dict(diff),
            }
        )
        return

    if diff.unchanged():
        out.success("Directories are identical")
        return

    if table:
        out.output_table(
            diff_to_rows(diff, include_same=show_same),
            ["status", "type", "path"],
            {"status": "Status", "type": "Type", "path": "Path"},
        )
    else:
        out.print_tree(build_diff_tree(diff, str(target_path), include_same=show_same))

    out.print("")
    out.print_summary(
        "Differences",
        [
            ("Missing", str(summary["missing"])),
            ("New", str(summary["new"])),
            ("Changed", str(summary["changed"])),
            ("Unreadable", str(summary["unreadable"])),
        ],
    )


@main.command()
@click.option(
    "--base-path",
    "-b",
    required=True,
    type=click.Path(path_type=Path),
    help="Directory to copy from (never modified)",
)
@click.option(
    "--target-path",
    "-t",
    required=True,
    type=click.Path(path_type=Path),
    help="Directory to bring in line with the base",
)
@click.option(
    "--sync-strategy",
    "-s",
    default=None,
    help="full: remove target-only items, patch: keep them (default: full)",
)
@click.option(
    "--dry-run", is_flag=True, help="Show what would be synced without syncing"
)
@click.pass_context
def sync(
    ctx: Any,
    base_path: Path,
    target_path: Path,
    sync_strategy: Optional[str],
    dry_run: bool,
) -> None:
    """Make the target directory match the base directory.

    Sync Strategies:
      - full (f): Mirror base exactly, removing anything only in target
      - patch (p): Copy missing and changed items, keep everything else

    Examples:
        dirmirror sync -b ./photos -t /mnt/backup/photos
        dirmirror sync -b ./photos -t /mnt/backup/photos -s patch
        dirmirror --no-commit sync -b ./docs -t ./docs-copy   # Preview only
    """
    out: OutputFormatter = ctx.obj["out"]
    dry_run = dry_run or ctx.obj.get("no_commit", False)

    if not ctx.obj.get("verbose", False):
        # Planned and executed operations are both logged at INFO level
        logging.getLogger("dirmirror").setLevel(logging.INFO)

    try:
        engine = _load_engine(out)
        strategy = SyncStrategy.from_string(
            sync_strategy or config.get_default_strategy()
        )
        stats = engine.sync_pair(base_path, target_path, strategy, dry_run=dry_run)

        if out.json_output:
            out.output_json(stats)

    except KeyboardInterrupt:
        out.warning("\nSync cancelled by user")
        ctx.exit(130)
    except (DirMirrorError, ValueError) as e:
        out.error(str(e))
        cause = e.__cause__
        if cause is not None:
            logger.debug("Caused by: %r", cause)
        ctx.exit(1)


@main.command()
@click.option(
    "--base-path",
    "-b",
    required=True,
    type=click.Path(path_type=Path),
    help="Directory to organize",
)
@click.pass_context
def organize(ctx: Any, base_path: Path) -> None:
    """Plan the reorganization of a directory by naming convention.

    No naming convention is defined yet, so the plan is always empty.
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        engine = _load_engine(out)
        operations = engine.organize(base_path)
    except (DirMirrorError, ValueError) as e:
        out.error(str(e))
        ctx.exit(1)
        return

    for op in operations:
        logger.info(str(op))

    if out.json_output:
        out.output_json([op.to_dict() for op in operations])
        return

    if not operations:
        out.info("Nothing to organize")
        return

    out.output_table(
        operations_to_rows(operations),
        ["action", "path", "source"],
        {"action": "Action", "path": "Path", "source": "Source"},
    )


@main.group(name="config")
def config_group() -> None:
    """View or change persistent settings.

    Settings are stored in ~/.config/dirmirror/config.json.
    """


@config_group.command(name="show")
@click.pass_context
def config_show(ctx: Any) -> None:
    """Show the effective settings."""
    out: OutputFormatter = ctx.obj["out"]

    try:
        config.load()
        settings = config.as_dict()
    except DirMirrorConfigError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    if out.json_output:
        out.output_json(settings)
        return

    out.print_summary(
        "Settings",
        [(key, str(value)) for key, value in settings.items()],
    )


@config_group.command(name="set")
@click.argument("key", type=click.Choice(sorted(DEFAULTS)))
@click.argument("value", type=str)
@click.pass_context
def config_set(ctx: Any, key: str, value: str) -> None:
    """Change a setting.

    Examples:
        dirmirror config set default_strategy patch
        dirmirror config set ignore_patterns "*.tmp,.DS_Store"
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        config.load()
        stored = config.set(key, value)
        path = config.save()
    except DirMirrorConfigError as e:
        out.error(str(e))
        ctx.exit(1)
        return

    out.success(f"Set {key} = {stored!r} in {path}")


@config_group.command(name="path")
@click.pass_context
def config_path(ctx: Any) -> None:
    """Print the location of the config file."""
    out: OutputFormatter = ctx.obj["out"]
    click.echo(str(config.get_config_path()))
    if not config.is_configured() and not out.quiet:
        out.info("(file does not exist yet)")


if __name__ == "__main__":
    main()
