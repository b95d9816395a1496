"""
xva-import CLI - Main entry point.

Usage:
    xva-import [OPTIONS] COMMAND [ARGS]...

Uploads an XVA image to a XenServer / XCP-ng host and configures the
resulting VM.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import signal
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from .. import __version__
from ..config import ConnectionSettings, ImportConfig, load_config
from ..errors import Outcome
from ..instance import ImportContext, run_import_instance
from ..ui import ConsoleUi
from ..upload import http_upload
from ..xapi_client import Connection
from .decorators import report_errors

logger = logging.getLogger(__name__)

# Conventional exit status for a run interrupted by SIGINT.
EXIT_CANCELLED = 130

app = typer.Typer(
    name="xva-import",
    help="Import XVA images into XenServer / XCP-ng",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        Console().print(f"xva-import version {__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    xva-import - upload an XVA and configure the imported VM.
    """


async def _import(settings: ConnectionSettings, config: ImportConfig) -> Outcome:
    ui = ConsoleUi()
    connection = await Connection.login(
        settings.host, settings.username, settings.password, verify_ssl=settings.verify_ssl,
    )
    ctx = ImportContext(
        connection=connection,
        config=config,
        ui=ui,
        upload=functools.partial(http_upload, verify_ssl=settings.verify_ssl),
    )

    loop = asyncio.get_running_loop()

    def handle_signal() -> None:
        ui.error("Cancelling import...")
        ctx.cancel.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, handle_signal)

    try:
        return await run_import_instance(ctx)
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
        await connection.logout()


@app.command()
@report_errors
def run(
    config_file: Path = typer.Argument(..., help="YAML file describing the import"),
    host: Optional[str] = typer.Option(None, "--host", "-H", help="XAPI host (env: XVA_IMPORT_HOST)"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="XAPI user (env: XVA_IMPORT_USERNAME)"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="XAPI password (env: XVA_IMPORT_PASSWORD)"),
    insecure: bool = typer.Option(False, "--insecure", "-k", help="Skip TLS certificate verification"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Import the XVA described by CONFIG_FILE."""
    setup_logging(verbose)

    overrides: dict[str, object] = {
        k: v for k, v in {"host": host, "username": username, "password": password}.items()
        if v is not None
    }
    if insecure:
        overrides["verify_ssl"] = False
    settings = ConnectionSettings(**overrides)
    if not settings.host:
        raise typer.BadParameter("no host given (use --host or XVA_IMPORT_HOST)")

    config = load_config(config_file)

    try:
        outcome = asyncio.run(_import(settings, config))
    except asyncio.CancelledError:
        raise typer.Exit(EXIT_CANCELLED)

    if outcome is Outcome.HALT:
        raise typer.Exit(1)
