"""Command line interface definition."""

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from .. import services
from ..exceptions import StoreError
from ..version import version_info
from . import exit_on_error, group, load_logger, pad, user
from .dependencies import configure_dependencies, load_settings

log = logging.getLogger(__name__)

app = typer.Typer()
app.add_typer(group.app, name="group")
app.add_typer(pad.app, name="pad")
app.add_typer(user.app, name="user")


def version_callback(value: bool) -> None:
    """Print the version of the program."""
    if value:
        print(version_info())
        raise typer.Exit()


# W0613: version is not used, but it is
# M511: - mutable default arg of type Call, it's how it's defined
# B008: Do not perform function calls in argument defaults. It's how it's defined
@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(  # noqa: W0613, M511, B008
        None, "--version", callback=version_callback, is_eager=True
    ),
    store: Optional[Path] = typer.Option(  # noqa: M511, B008
        None,
        envvar="PAD_COLLABORATE_STORE",
        help="YAML file where the records are stored.",
    ),
    config: Optional[Path] = typer.Option(  # noqa: M511, B008
        None, envvar="PAD_COLLABORATE_CONFIG", help="YAML configuration file."
    ),
    verbose: bool = False,
) -> None:
    """Manage the users, groups and pads of a collaborative pad server."""
    ctx.ensure_object(dict)
    err_console = Console(stderr=True)
    load_logger(verbose)
    try:
        settings = load_settings(config)
        if store is not None:
            settings.store_path = store
        ctx.obj["deps"] = configure_dependencies(settings)
    except StoreError as error:
        err_console.print(str(error))
        raise typer.Exit(code=1) from error
    except ValidationError as error:
        err_console.print(str(error))
        raise typer.Exit(code=2) from error


@app.command()
def login(
    ctx: typer.Context,
    login_: str = typer.Argument(..., metavar="LOGIN", help="Login of the user."),
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Check the credentials of a user."""
    deps = ctx.obj["deps"]
    with exit_on_error():
        profile = services.verify_credentials(deps.users, login_, password)
    print(f"Credentials of {profile.login} are valid")


if __name__ == "__main__":
    app()
