"""CLI entry point for compat-excludes."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import click

from compat_excludes import __version__
from compat_excludes.config.settings import ExcludesSettings, load_config
from compat_excludes.loader import ExclusionLoader
from compat_excludes.registry import ExclusionIndex
from compat_excludes.reporter import ExclusionSummary, SummaryRenderer
from compat_excludes.utils.logging import configure_logging, get_logger
from compat_excludes.utils.result import ExitCode, LoadError, Result

# Default paths
DEFAULT_CONFIG = "./config"


class Context:
    """CLI context for sharing state between commands."""

    def __init__(self, settings: ExcludesSettings) -> None:
        self.settings = settings
        self.logger = get_logger("cli")
        self.last_loader: Optional[ExclusionLoader] = None

    def load(self, path: Optional[Path]) -> Result[ExclusionIndex, LoadError]:
        """Load an exclusion file or directory (default: the configured directory)."""
        loader = ExclusionLoader(
            policy=self.settings.excludes.on_parse_error,
            pattern=self.settings.excludes.pattern,
        )
        self.last_loader = loader
        return loader.load_path(path or self.settings.excludes.directory)


pass_context = click.make_pass_decorator(Context)


def output_json(data: dict) -> None:
    """Output JSON to stdout."""
    click.echo(json.dumps(data, indent=2, default=str))


def fail(error: object, exit_code: int) -> None:
    """Report an error as JSON and exit."""
    output_json({
        "status": "error",
        "message": str(error),
    })
    sys.exit(exit_code)


def load_or_exit(ctx: Context, path: Optional[Path]) -> ExclusionIndex:
    result = ctx.load(path)
    if result.is_err():
        error = result.unwrap_err()
        ctx.logger.error("load_failed", error=str(error))
        exit_code = ExitCode.PARSE_FAILED if error.cause else ExitCode.PATH_NOT_FOUND
        fail(error, exit_code)
    return result.unwrap()


path_option = click.option(
    "--path",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Exclusion file or directory (default: configured directory)",
)


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=False, path_type=Path),
    default=DEFAULT_CONFIG,
    help="Path to config directory",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "error"], case_sensitive=False),
    default=None,
    help="Logging level (overrides config)",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    default=None,
    help="Log format (overrides config)",
)
@click.version_option(version=__version__)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path,
    log_level: Optional[str],
    log_format: Optional[str],
) -> None:
    """
    Exclusion lists for imported test suites.

    Checks, queries and summarizes the per-suite exclusion files that a
    compatibility test harness uses to skip known-failing test cases.
    """
    result = load_config(config)
    if result.is_err():
        configure_logging(level=log_level or "info", format_type=log_format or "json")
        fail(result.unwrap_err(), ExitCode.CONFIG_INVALID)
    settings = result.unwrap()

    configure_logging(
        level=log_level or settings.logging.level,
        format_type=log_format or settings.logging.format,
    )

    ctx.obj = Context(settings=settings)


@cli.command()
@click.argument(
    "path",
    type=click.Path(exists=False, path_type=Path),
    required=False,
)
@pass_context
def check(ctx: Context, path: Optional[Path]) -> None:
    """Parse exclusion files and report errors and duplicate names."""
    index = load_or_exit(ctx, path)
    skipped = ctx.last_loader.skipped

    duplicates = {
        registry.suite: registry.duplicates()
        for registry in index
        if registry.duplicates()
    }

    output_json({
        "status": "error" if skipped else "success",
        "suites": len(index),
        "entries": index.total_entries(),
        "duplicates": duplicates,
        "errors": [str(error) for error in skipped],
    })

    if skipped:
        sys.exit(ExitCode.PARSE_FAILED)


@cli.command()
@click.argument("suite")
@click.argument("test_name")
@path_option
@pass_context
def query(ctx: Context, suite: str, test_name: str, path: Optional[Path]) -> None:
    """Show whether TEST_NAME of SUITE is excluded, and why."""
    index = load_or_exit(ctx, path)
    reason = index.reason_for(suite, test_name)

    output_json({
        "suite": suite,
        "test_name": test_name,
        "excluded": reason.is_ok(),
        "reason": reason.unwrap_or(None),
    })


@cli.command(name="list")
@click.option("--suite", default=None, help="Only list this suite")
@path_option
@pass_context
def list_entries(ctx: Context, suite: Optional[str], path: Optional[Path]) -> None:
    """List excluded test cases."""
    index = load_or_exit(ctx, path)

    entries = []
    for registry in index:
        if suite and registry.suite != suite:
            continue
        for entry in registry:
            entries.append({"suite": registry.suite, **entry.to_dict()})

    output_json({
        "count": len(entries),
        "entries": entries,
    })


@cli.command()
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the Markdown summary to this file instead of stdout",
)
@path_option
@pass_context
def report(ctx: Context, output: Optional[Path], path: Optional[Path]) -> None:
    """Render a Markdown summary of the exclusion lists."""
    index = load_or_exit(ctx, path)
    summary = ExclusionSummary.from_index(index)
    renderer = SummaryRenderer(ctx.settings.report.templates_dir)

    if output is None:
        click.echo(renderer.render(summary, title=ctx.settings.report.title), nl=False)
        return

    renderer.write(summary, output, title=ctx.settings.report.title)
    output_json({
        "status": "success",
        "output": str(output),
        "total_excluded": summary.total_excluded,
    })


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except Exception as e:
        logger = get_logger("cli")
        logger.error("cli_error", error=str(e))
        sys.exit(ExitCode.GENERAL_ERROR)


if __name__ == "__main__":
    main()
