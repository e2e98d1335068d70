"""Define the different ways to expose the program functionality.

Functions that expose the program functionality to the user. It can be
through a command line interface, a HTTP API or a graphical interface.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator

import typer
from rich.console import Console

from .. import exceptions


def load_logger(verbose: bool = False) -> None:  # pragma no cover
    """Configure the Logging logger.

    Args:
        verbose: Set the logging level to Debug.
    """
    logging.addLevelName(logging.INFO, "[\033[36m+\033[0m]")
    logging.addLevelName(logging.ERROR, "[\033[31m+\033[0m]")
    logging.addLevelName(logging.DEBUG, "[\033[32m+\033[0m]")
    logging.addLevelName(logging.WARNING, "[\033[33m+\033[0m]")
    if verbose:
        logging.basicConfig(
            stream=sys.stderr, level=logging.DEBUG, format="  %(levelname)s %(message)s"
        )
    else:
        logging.basicConfig(
            stream=sys.stderr, level=logging.INFO, format="  %(levelname)s %(message)s"
        )


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Print the program errors and exit with the matching code."""
    try:
        yield
    except (exceptions.ValidationError, exceptions.ReferentialIntegrityError) as error:
        Console(stderr=True).print(str(error))
        raise typer.Exit(code=2) from error
    except exceptions.AuthenticationError as error:
        Console(stderr=True).print(str(error))
        raise typer.Exit(code=401) from error
    except exceptions.NotFoundError as error:
        Console(stderr=True).print(str(error))
        raise typer.Exit(code=404) from error
    except exceptions.StoreError as error:
        Console(stderr=True).print(str(error))
        raise typer.Exit(code=1) from error
