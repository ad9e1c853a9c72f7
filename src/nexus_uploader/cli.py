"""Command-line interface for the Nexus artifact uploader."""

import enum
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from nexus_uploader.api_client import NexusClient
from nexus_uploader.arguments import validate_args
from nexus_uploader.errors import ConfigError, UploadError
from nexus_uploader.models import RawInput
from nexus_uploader.uploader import ArtifactUploader
from nexus_uploader.utils import UPLOAD_STATUS_KEY, write_upload_status

app = typer.Typer(
    name="nexus-uploader",
    help="Upload build artifacts to a Nexus repository",
    add_completion=False,
)
console = Console()


class LogLevel(str, enum.Enum):
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"


def setup_logging(level: LogLevel, verbose: bool) -> None:
    """Configure logging with Rich handler.

    Args:
        level: Log level name
        verbose: Enable verbose (DEBUG) logging regardless of ``level``
    """
    log_level = logging.DEBUG if verbose else getattr(logging, level.value.upper())
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, console=console)],
    )


def run_upload(raw: RawInput, output_file: Path | None, timeout: float) -> int:
    """Validate the inputs, upload the artifacts and publish the outcome.

    Args:
        raw: Plugin inputs
        output_file: File receiving the output variables, if any
        timeout: HTTP timeout in seconds

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    logger = logging.getLogger(__name__)

    try:
        session, ledger = validate_args(raw)
    except ConfigError as e:
        logger.error(f"Invalid plugin arguments: {e}")
        console.print(f"[red]Error: {e}[/red]")
        return 1

    rejected = len(ledger)

    try:
        with NexusClient(session.username, session.password, timeout=timeout) as api_client:
            uploader = ArtifactUploader(api_client, logger=logger)
            uploader.upload_artifacts(session, ledger)
    except UploadError as e:
        logger.error(f"Upload failed: {e}")
    except Exception as e:
        logger.error(f"Upload failed: {e}", exc_info=True)
        return 1

    try:
        write_upload_status(ledger, output_file)
    except OSError as e:
        logger.error(f"Writing output variable {UPLOAD_STATUS_KEY} failed: {e}")

    total = len(session.artifacts) + rejected
    failed = len(ledger)

    console.print("\n[bold]Upload Summary:[/bold]")
    console.print(f"  Total artifacts: {total}")
    console.print(f"  [green]Successful: {total - failed}[/green]")
    console.print(f"  [red]Failed: {failed}[/red]")

    if failed > 0:
        console.print("\n[bold red]Failed artifacts:[/bold red]")
        for entry in ledger:
            console.print(f"  - {entry.file} ({entry.artifact_id}): {entry.err}")
        return 1

    return 0


@app.command()
def upload(
    username: str = typer.Option("", "--username", envvar="PLUGIN_USERNAME", help="Nexus user name"),
    password: str = typer.Option("", "--password", envvar="PLUGIN_PASSWORD", help="Nexus password"),
    server_url: str = typer.Option(
        "",
        "--server-url",
        envvar="PLUGIN_SERVER_URL",
        help="Nexus server URL (host only in multi-file mode, absolute URL in single-file mode)",
    ),
    protocol: str = typer.Option(
        "", "--protocol", envvar="PLUGIN_PROTOCOL", help="URL scheme for multi-file mode (http or https)"
    ),
    nexus_version: str = typer.Option(
        "", "--nexus-version", envvar="PLUGIN_NEXUS_VERSION", help="Nexus protocol: nexus2 or nexus3"
    ),
    repository: str = typer.Option("", "--repository", envvar="PLUGIN_REPOSITORY", help="Target repository"),
    group_id: str = typer.Option(
        "", "--group-id", envvar="PLUGIN_GROUP_ID", help="Default group id for multi-file mode"
    ),
    format: str = typer.Option(
        "", "--format", envvar="PLUGIN_FORMAT", help="Repository format (maven2, raw, yum, ...)"
    ),
    artifacts: str = typer.Option(
        "", "--artifacts", envvar="PLUGIN_ARTIFACTS", help="YAML or JSON list of artifacts (multi-file mode)"
    ),
    filename: str = typer.Option(
        "", "--filename", envvar="PLUGIN_FILENAME", help="File to upload (single-file mode)"
    ),
    attributes: str = typer.Option(
        "",
        "--attributes",
        envvar="PLUGIN_ATTRIBUTES",
        help="Legacy coordinates, e.g. '-CgroupId=g -Cversion=1 -Aextension=jar -Aclassifier=bin'",
    ),
    output_file: Optional[Path] = typer.Option(
        None,
        "--output-file",
        envvar="DRONE_OUTPUT",
        dir_okay=False,
        help="File receiving the UPLOAD_STATUS output variable",
    ),
    timeout: float = typer.Option(
        30.0,
        "--timeout",
        envvar="PLUGIN_TIMEOUT",
        min=1.0,
        help="HTTP timeout in seconds",
    ),
    log_level: LogLevel = typer.Option(
        LogLevel.info,
        "--log-level",
        envvar="PLUGIN_LOG_LEVEL",
        case_sensitive=False,
        help="Log level",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Upload artifacts to a Nexus repository.

    Either pass ARTIFACTS, a list of artifacts with their coordinates, or the
    legacy FILENAME plus ATTRIBUTES pair for a single file. Every option can
    also be set through its PLUGIN_* environment variable.
    """
    setup_logging(log_level, verbose)

    raw = RawInput(
        username=username,
        password=password,
        server_url=server_url,
        protocol=protocol,
        repository=repository,
        group_id=group_id,
        format=format,
        nexus_version=nexus_version,
        artifacts=artifacts,
        filename=filename,
        attributes=attributes,
    )
    exit_code = run_upload(raw, output_file, timeout)
    raise typer.Exit(exit_code)


if __name__ == "__main__":
    app()
