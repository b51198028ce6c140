import typer
from enum import Enum
from typing import Optional

from kview import __version__
from kview.connectors.base import StreamClient
from kview.connectors.kinesis import KinesisStreamClient
from kview.errors import (
    InvalidConfigError,
    MissingConfigError,
    NoShardsError,
    ProtocolViolationError,
    StreamServiceError,
)
from kview.runner import CLEAR_SCREEN, SEPARATOR, Runner
from kview.settings import ViewerSettings, resolve_settings
from kview.sinks import SINKS
from kview.utils.logging import setup_logging

app = typer.Typer(help="Tail the newest records of a Kinesis stream's first shard.", add_completion=False)


class OutputFormat(str, Enum):
    text = "text"
    json = "json"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


def build_client(settings: ViewerSettings) -> StreamClient:
    return KinesisStreamClient.from_settings(settings)


def _version_callback(value: bool):
    if value:
        typer.echo(f"kview {__version__}")
        raise typer.Exit()


@app.command()
def tail(
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print record payloads"),
    output: OutputFormat = typer.Option(OutputFormat.text, "--format", "-f", help="Record output format"),
    poll_interval: Optional[float] = typer.Option(
        None, "--poll-interval", min=0.001, help="Seconds between GetRecords calls (default: KVIEW_POLL_INTERVAL or 1.0)"
    ),
    log_level: LogLevel = typer.Option(LogLevel.WARNING, "--log-level", help="Log level (logs go to stderr)"),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"),
):
    """
    Read AWS credentials, region and stream name from the environment, then
    print every record appended to the stream's first shard from now on.
    """
    setup_logging(log_level.value)

    if not quiet:
        typer.echo(CLEAR_SCREEN, nl=False)
        typer.echo(f"Kinesis Event Viewer v{__version__}")
        typer.echo(SEPARATOR)

    try:
        settings = resolve_settings()
    except MissingConfigError as e:
        for key in e.missing:
            typer.echo(f"{key} is not set")
        raise typer.Exit(code=0)
    except InvalidConfigError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=2)

    if not quiet:
        for line in settings.describe():
            typer.echo(line)
        typer.echo(SEPARATOR)

    runner = Runner(
        build_client(settings),
        SINKS[output.value](),
        settings.stream_name,
        poll_interval=poll_interval or settings.poll_interval,
        quiet=quiet,
        console=typer.echo,
    )

    try:
        runner.run()
    except NoShardsError as e:
        typer.echo(str(e))
        raise typer.Exit(code=0)
    except (StreamServiceError, ProtocolViolationError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        raise typer.Exit(code=130)


if __name__ == "__main__":
    app()
