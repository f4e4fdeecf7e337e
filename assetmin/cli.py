"""CLI entrypoint for assetmin."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import MinifierConfig, find_config, load_config
from .errors import ConfigError
from .models import AssetKind, CompactionRequest

KIND_CHOICE = click.Choice([k.value for k in AssetKind], case_sensitive=False)


def _load(config_path: Path | None) -> MinifierConfig:
    """Explicit config file, else ./assetmin.toml found walking up, else defaults."""
    if config_path is None:
        config_path = find_config(Path.cwd())
        if config_path is None:
            return MinifierConfig()
    try:
        return load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(__version__, prog_name="assetmin")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to assetmin.toml (defaults to the nearest one above the current directory)",
)
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Asset root holding <kind>/ sources and live<kind>/ artifacts",
)
@click.option(
    "--ledger",
    "ledger_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Version ledger file (KEY=VALUE lines)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Diagnostic logging level",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    base_dir: Path | None,
    ledger_path: Path | None,
    log_level: str,
) -> None:
    """assetmin - combine, compact and version-stamp JS/CSS assets.

    Sources under <base>/<kind>/ are concatenated, minified and written to
    <base>/live<kind>/<name>-<stamp>.<kind>; the ledger records the live stamp
    and the previous artifact is removed.
    """
    logging.basicConfig(level=getattr(logging, log_level.upper()), format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    config = _load(config_path).with_overrides(base_dir=base_dir, ledger_path=ledger_path)
    ctx.obj["config"] = config


@cli.command()
@click.option("--type", "-t", "kind", type=KIND_CHOICE, required=True, help="Asset kind to minify")
@click.argument("files", nargs=-1)
@click.option("--output-name", "-o", default=None, help="Base name of the artifact (default from config: main)")
@click.option(
    "--append-version/--no-append-version",
    "append_version",
    default=None,
    help="Embed the version stamp in the artifact name (default from config: on)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress progress and failure messages")
@click.option("--strict", is_flag=True, help="Exit with status 1 when the publish fails")
@click.option("--dry-run", is_flag=True, help="Show what would be written and deleted, write nothing")
@click.pass_context
def minify(
    ctx: click.Context,
    kind: str,
    files: tuple[str, ...],
    output_name: str | None,
    append_version: bool | None,
    quiet: bool,
    strict: bool,
    dry_run: bool,
) -> None:
    """Combine and minify assets of one kind.

    FILES are names inside the input directory, concatenated in the given
    order. Without FILES every file with the kind's extension is used.

    A failed publish is reported but does not change the exit status unless
    --strict is given.

    Examples:

        assetmin minify --type js

        assetmin minify -t css reset.css layout.css -o site

        assetmin minify -t js --no-append-version --dry-run
    """
    from .commands.minify_cmd import run_minify

    config: MinifierConfig = ctx.obj["config"]
    request = CompactionRequest(
        kind=AssetKind.parse(kind),
        input_files=files,
        output_name=output_name or config.output_name,
        append_version=config.append_version if append_version is None else append_version,
    )
    exit_code = run_minify(
        config,
        request,
        verbose=config.verbose and not quiet,
        strict=strict,
        dry_run=dry_run,
    )
    sys.exit(exit_code)


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output entries as JSON")
@click.pass_context
def ledger(ctx: click.Context, output_json: bool) -> None:
    """Show the version ledger and the live artifact for each entry."""
    from .commands.ledger_cmd import run_ledger

    exit_code = run_ledger(ctx.obj["config"], output_json=output_json)
    sys.exit(exit_code)


@cli.command()
@click.option("--last", "last_n", type=int, default=None, help="Show only the last N publishes")
@click.pass_context
def history(ctx: click.Context, last_n: int | None) -> None:
    """Show the publish audit log (created and erased artifacts)."""
    from .commands.ledger_cmd import run_history

    run_history(ctx.obj["config"].audit_log_path, last_n=last_n)


@cli.command()
@click.option("--type", "-t", "kind", type=KIND_CHOICE, required=True, help="Asset kind to watch")
@click.option("--output-name", "-o", default=None, help="Base name of the artifact (default from config: main)")
@click.option("--quiet", "-q", is_flag=True, help="Suppress progress and failure messages")
@click.pass_context
def watch(ctx: click.Context, kind: str, output_name: str | None, quiet: bool) -> None:
    """Republish an asset kind whenever its sources change.

    Runs until interrupted (Ctrl+C).
    """
    from .commands.minify_cmd import run_watch

    config: MinifierConfig = ctx.obj["config"]
    request = CompactionRequest(
        kind=AssetKind.parse(kind),
        output_name=output_name or config.output_name,
        append_version=config.append_version,
    )
    run_watch(config, request, verbose=config.verbose and not quiet)


if __name__ == "__main__":
    cli()
