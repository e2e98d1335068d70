"""Pad command line interface definition."""

from typing import List, Optional

import typer

from .. import views
from . import exit_on_error

app = typer.Typer()


@app.command()
def add(  # noqa: B008
    ctx: typer.Context,
    name: str = typer.Argument(..., help="name of the pad"),
    group_id: str = typer.Argument(..., help="group that owns the pad"),
    visibility: Optional[str] = typer.Option(
        None, help="restricted, private or public. Inherited from the group if unset"
    ),
    users: Optional[List[str]] = typer.Option(
        None, "--user", help="Login of a user allowed to a restricted pad"
    ),
    password: Optional[str] = typer.Option(
        None, help="Password of the pad. Inherited from the group if unset"
    ),
    readonly: Optional[bool] = typer.Option(
        None,
        "--readonly/--writable",
        help="Edition mode of the pad. Inherited from the group if unset",
    ),
) -> None:
    """Add a new pad to a group."""
    pads = ctx.obj["deps"].pads
    with exit_on_error():
        pad = pads.create(
            {
                "name": name,
                "group": group_id,
                "visibility": visibility,
                "users": users or [],
                "password": password,
                "readonly": readonly,
            }
        )
    print(pad.id_)


@app.command()
def show(ctx: typer.Context, pad_id: str) -> None:
    """Print the information of a pad, with the values inherited from its group."""
    pads = ctx.obj["deps"].pads
    with exit_on_error():
        pad = pads.resolve(pad_id)
    views.print_pad(pad)


@app.command()
def delete(ctx: typer.Context, pad_id: str) -> None:
    """Remove a pad."""
    pads = ctx.obj["deps"].pads
    with exit_on_error():
        pad = pads.delete(pad_id)
    print(f"Deleted pad {pad.name}")


if __name__ == "__main__":
    app()
