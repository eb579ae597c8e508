import logging
import sys

import typer
import uvicorn

from . import __version__
from .commands import server
from .logging import setup_logging

app = typer.Typer(help="panelctl - panel server management CLI.")

debug_mode = False

app.add_typer(server.app, name="server")


def _version_callback(value: bool):
    if value:
        typer.echo(f"panelctl {__version__}")
        raise typer.Exit()


# Global options callback
@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """panelctl - panel server management CLI."""
    global debug_mode
    debug_mode = debug
    setup_logging(debug)
    if debug:
        logging.debug("Debug mode enabled")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on"),
):
    """Run the HTTP API."""
    uvicorn.run("panelctl.api.main:app", host=host, port=port, log_level="debug" if debug_mode else "info")


def run():
    try:
        app()
    except Exception as e:
        if debug_mode:
            import traceback
            logging.error(f"Unhandled exception: {e}\n{traceback.format_exc()}")
        else:
            logging.error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
