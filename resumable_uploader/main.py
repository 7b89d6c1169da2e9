"""
Main entry point for the Resumable Uploader.

This module provides the command-line interface: uploading files in
resumable chunks, querying the server's recorded offset, listing and
downloading remote files, and managing configuration files.
"""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import typer

from .application.startup import UploaderApplication
from .core.domain.upload import BatchResult
from .core.exceptions import NoFilesSelected, RemoteFileNotFound, UploadError
from .core.interfaces.upload import IProgressSink
from .infrastructure.config.loader import ConfigLoader
from .infrastructure.config.models import ApplicationConfig
from .infrastructure.logging.setup import LoggingManager, setup_logging
from .presentation.sinks import CompositeProgressSink, ConsoleProgressSink, LoggingProgressSink

EXIT_FAILED = 1
EXIT_USAGE = 2

cli = typer.Typer(
    name="resumable-uploader",
    help="Chunked, resumable file uploads over HTTP"
)


def _load_config(
    config_file: Optional[str],
    server: Optional[str] = None,
    chunk_size: Optional[int] = None,
    log_level: Optional[str] = None,
    debug: bool = False
) -> ApplicationConfig:
    """Load configuration and apply command line overrides."""
    config_loader = ConfigLoader()
    try:
        config = config_loader.load_config(config_file)

        if server:
            config.server.base_url = server
        if chunk_size:
            config.upload.chunk_size = chunk_size
        if log_level:
            config.logging.level = log_level.upper()
        if debug:
            config.debug = True
            config.logging.level = "DEBUG"

        config.validate()
        setup_logging(config.logging)
    except (FileNotFoundError, ValueError, TypeError) as e:
        typer.echo(f"Configuration error: {e}", err=True)
        sys.exit(EXIT_USAGE)

    return config


def _print_summary(result: BatchResult) -> None:
    for outcome in result.outcomes:
        if outcome.succeeded:
            typer.echo(f"{outcome.filename}: Complete ({outcome.total_size} bytes)")
        else:
            typer.echo(f"{outcome.filename}: Failed ({outcome.error})", err=True)


@cli.command()
def upload(
    paths: Optional[List[Path]] = typer.Argument(
        None, help="Files to upload, in order"
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Configuration file path"
    ),
    server: Optional[str] = typer.Option(
        None, "--server", "-s", help="Upload server base URL"
    ),
    chunk_size: Optional[int] = typer.Option(
        None, "--chunk-size", help="Chunk size in bytes"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level"
    ),
    debug: bool = typer.Option(
        False, "--debug", help="Enable debug logging"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Report progress through the log only"
    )
) -> None:
    """Upload files, resuming from the offset the server already holds."""

    config = _load_config(config_file, server, chunk_size, log_level, debug)

    sink: IProgressSink
    if quiet:
        sink = LoggingProgressSink(LoggingManager(config.logging))
    elif config.logging.file_enabled:
        sink = CompositeProgressSink([
            ConsoleProgressSink(),
            LoggingProgressSink(LoggingManager(config.logging)),
        ])
    else:
        sink = ConsoleProgressSink()

    async def run() -> BatchResult:
        async with UploaderApplication(config, sink) as app:
            return await app.upload_paths(paths or [])

    try:
        result = asyncio.run(run())
    except NoFilesSelected as e:
        typer.echo(e.message, err=True)
        sys.exit(EXIT_USAGE)
    except FileNotFoundError as e:
        typer.echo(str(e), err=True)
        sys.exit(EXIT_USAGE)

    _print_summary(result)
    if not result.all_succeeded:
        sys.exit(EXIT_FAILED)


@cli.command()
def status(
    filename: str = typer.Argument(..., help="Server-side file name"),
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Configuration file path"
    ),
    server: Optional[str] = typer.Option(
        None, "--server", "-s", help="Upload server base URL"
    )
) -> None:
    """Show how many bytes of a file the server already holds."""

    config = _load_config(config_file, server)

    async def run() -> int:
        async with UploaderApplication(config) as app:
            return await app.resume_offset(filename)

    offset = asyncio.run(run())
    typer.echo(f"{filename}: {offset} bytes")


@cli.command("list")
def list_files(
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Configuration file path"
    ),
    server: Optional[str] = typer.Option(
        None, "--server", "-s", help="Upload server base URL"
    )
) -> None:
    """List files stored on the server."""

    config = _load_config(config_file, server)

    async def run() -> list:
        async with UploaderApplication(config) as app:
            return await app.client.list_files()

    try:
        files = asyncio.run(run())
    except UploadError as e:
        typer.echo(f"Listing failed: {e.status_text}", err=True)
        sys.exit(EXIT_FAILED)

    if not files:
        typer.echo("No files on server")
        return
    for remote in files:
        typer.echo(f"{remote.name}\t{remote.size}")


@cli.command()
def download(
    filename: str = typer.Argument(..., help="Server-side file name"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Destination path (defaults to the file name)"
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Configuration file path"
    ),
    server: Optional[str] = typer.Option(
        None, "--server", "-s", help="Upload server base URL"
    )
) -> None:
    """Download a file from the server."""

    config = _load_config(config_file, server)
    destination = output or Path(Path(filename).name)

    async def run() -> int:
        async with UploaderApplication(config) as app:
            return await app.client.download(filename, destination)

    try:
        written = asyncio.run(run())
    except RemoteFileNotFound as e:
        typer.echo(e.message, err=True)
        sys.exit(EXIT_FAILED)
    except UploadError as e:
        typer.echo(f"Download failed: {e.status_text}", err=True)
        sys.exit(EXIT_FAILED)

    typer.echo(f"Saved {filename} to {destination} ({written} bytes)")


@cli.command()
def init_config(
    output: str = typer.Option(
        "uploader.yaml", "--output", "-o", help="Output configuration file"
    ),
    format: str = typer.Option(
        "yaml", "--format", "-f", help="Configuration format (yaml/json)"
    )
) -> None:
    """Generate a default configuration file."""

    config = ApplicationConfig()
    config_loader = ConfigLoader()

    try:
        config_loader.save_config(config, output, format)
        typer.echo(f"Default configuration saved to {output}")
    except ValueError as e:
        typer.echo(f"Error saving configuration: {e}", err=True)
        sys.exit(EXIT_FAILED)


@cli.command()
def validate_config(
    config_file: str = typer.Argument(...,
                                      help="Configuration file to validate")
) -> None:
    """Validate a configuration file."""

    config_loader = ConfigLoader()

    try:
        config = config_loader.load_config(config_file)
        typer.echo(f"Configuration file {config_file} is valid")
        typer.echo(f"Server: {config.server.base_url}")
        typer.echo(f"Chunk size: {config.upload.chunk_size} bytes")
        logging_info = LoggingManager(config.logging).describe()
        typer.echo(
            f"Logging: {logging_info['log_level']}"
            f" (file: {'on' if logging_info['file_enabled'] else 'off'})")
    except (FileNotFoundError, ValueError, TypeError) as e:
        typer.echo(f"Configuration validation failed: {e}", err=True)
        sys.exit(EXIT_FAILED)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
