"""
CLI entry point for the Syncthing status aggregator.
Polls the daemon forever and prints one JSON status line per event batch.
"""
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

import click

from .api_client import ApiClient
from .config import (
    API_KEY_ENV,
    BASE_URL_ENV,
    DEFAULT_BASE_URL,
    DEFAULT_LOG_LEVEL,
    LOG_FILE,
)
from .errors import ConfigError, SyncwatchError
from .reconcile import EventReconciler
from .render import render_line
from .state import SyncState
from .utils.secrets import read_secret


logger = logging.getLogger(__name__)


def setup_logging(log_level: str, log_file: Path = LOG_FILE) -> None:
    """
    Configure logging with the specified level. Stdout is left to the status lines.

    Raises:
        ConfigError: If the log file cannot be created
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
    except OSError as e:
        raise ConfigError(f"Cannot open log file {log_file}: {e}") from e
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            file_handler,
            logging.StreamHandler(sys.stderr)
        ]
    )
    logger.debug(f"Logging initialized at level {log_level}")


def run_loop(
    reconciler: EventReconciler,
    state: SyncState,
    out: TextIO,
    max_iterations: Optional[int] = None
) -> SyncState:
    """
    Reconcile and print a status line, over and over.

    There is no sleep between iterations; the long-polling events request
    paces the loop. Errors are not caught here.

    Args:
        reconciler: Event reconciler bound to a daemon client
        state: Aggregator state
        out: Stream receiving one JSON line per iteration
        max_iterations: Stop after this many iterations, or never if None

    Returns:
        The final state
    """
    iteration = 0
    while max_iterations is None or iteration < max_iterations:
        reconciler.reconcile(state)
        out.write(render_line(state.pending, state.directory) + "\n")
        out.flush()
        iteration += 1
    return state


@click.command(name="syncwatch")
@click.option(
    "-a", "--api-key",
    envvar=API_KEY_ENV,
    required=True,
    help="Syncthing API key, or a path to a file containing it.",
)
@click.option(
    "-b", "--base-url",
    envvar=BASE_URL_ENV,
    default=DEFAULT_BASE_URL,
    show_default=True,
    help="Base URL of the Syncthing GUI/REST listener.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=DEFAULT_LOG_LEVEL,
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=LOG_FILE,
    show_default=True,
)
def main(api_key: str, base_url: str, log_level: str, log_file: Path) -> None:
    """Print Syncthing transfer progress as JSON lines for a status bar."""
    api_client = None
    try:
        setup_logging(log_level, log_file)
        api_client = ApiClient(base_url, read_secret(api_key))
        logger.info(f"Watching Syncthing at {api_client.base_url}")
        run_loop(EventReconciler(api_client), SyncState(), sys.stdout)

    except SyncwatchError as e:
        logger.exception("Error in syncwatch")
        click.echo(f"Error: {str(e)}", err=True)
        sys.exit(1)

    finally:
        if api_client is not None:
            api_client.close()


if __name__ == "__main__":
    main()
