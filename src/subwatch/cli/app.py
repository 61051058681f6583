"""Main CLI application."""

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

app = typer.Typer(
    name="subwatch",
    help="subwatch - submarine return notifications",
    add_completion=False,
)


class SourceKind(str, Enum):
    sqlite = "sqlite"
    snapshots = "snapshots"


@app.command()
def main(
    daemon: Annotated[
        bool,
        typer.Option(
            "--daemon",
            "-d",
            help="Watch return times and notify when submarines come back",
        ),
    ] = False,
    update: Annotated[
        str | None,
        typer.Option(
            "--update",
            "-u",
            help='Set every return time to a local time, e.g. "11/14/2024 16:59"',
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
        ),
    ] = None,
    source: Annotated[
        SourceKind | None,
        typer.Option(
            "--source",
            "-s",
            help="Override the configured source",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging",
        ),
    ] = False,
) -> None:
    """List submarine return times, or watch them with --daemon.

    Examples:
        subwatch                             # List all submarines
        subwatch --daemon                    # Notify as submarines return
        subwatch --update "11/14/2024 16:59" # Rewrite all return times
    """
    import asyncio

    from subwatch.cli.console import error, plain, success
    from subwatch.cli.runtime import load_submarines, run_daemon, update_return_times
    from subwatch.config import ConfigError, load_config
    from subwatch.logging import configure_logging
    from subwatch.tracking import InputFormatError, StorageError
    from subwatch.tracking.formatting import (
        format_listing,
        parse_game_time,
        resolve_timezone,
    )
    from subwatch.tracking.types import utc_now

    try:
        config = load_config(config_path)
    except (FileNotFoundError, ConfigError) as e:
        error(str(e))
        raise typer.Exit(1) from None

    if source is not None:
        config.source.kind = source.value

    configure_logging(
        level="DEBUG" if verbose else config.logging.level,
        use_rich=daemon,
        log_to_file=config.logging.log_to_file,
    )
    tz = resolve_timezone(config.timezone)

    if update is not None:
        try:
            when = parse_game_time(update, tz)
            asyncio.run(update_return_times(config, when))
        except (InputFormatError, StorageError) as e:
            error(str(e))
            raise typer.Exit(1) from None
        success("All submarine return times updated! These are the new return times...")

    if daemon:
        try:
            asyncio.run(run_daemon(config))
        except StorageError as e:
            error(str(e))
            raise typer.Exit(1) from None
        return

    try:
        submarines = asyncio.run(load_submarines(config))
    except StorageError as e:
        error(str(e))
        raise typer.Exit(1) from None

    for line in format_listing(submarines, tz, utc_now()):
        plain(line)


if __name__ == "__main__":
    app()
