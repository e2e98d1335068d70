"""Group command line interface definition."""

from typing import List, Optional

import typer

from .. import views
from . import exit_on_error

app = typer.Typer()


@app.command()
def add(  # noqa: B008
    ctx: typer.Context,
    name: str = typer.Argument(..., help="name of the group"),
    admins: List[str] = typer.Option(..., "--admin", help="Login of an admin"),
    users: Optional[List[str]] = typer.Option(
        None, "--user", help="Login of a member of the group"
    ),
    visibility: Optional[str] = typer.Option(
        None, help="Default visibility of the pads: restricted, private or public"
    ),
    password: Optional[str] = typer.Option(None, help="Default password of the pads"),
    readonly: Optional[bool] = typer.Option(
        None, "--readonly/--writable", help="Default edition mode of the pads"
    ),
) -> None:
    """Add a new group."""
    groups = ctx.obj["deps"].groups
    with exit_on_error():
        group = groups.create(
            {
                "name": name,
                "admins": admins,
                "users": users or [],
                "visibility": visibility,
                "password": password,
                "readonly": readonly,
            }
        )
    print(group.id_)


@app.command()
def add_users(
    ctx: typer.Context,
    group_id: str = typer.Argument(...),
    logins: List[str] = typer.Argument(..., help="Logins of the users to add."),
) -> None:
    """Add a list of users to an existent group."""
    groups = ctx.obj["deps"].groups
    with exit_on_error():
        group = groups.add_users(group_id, logins)
    views.print_group(group)


@app.command()
def remove_users(
    ctx: typer.Context,
    group_id: str = typer.Argument(...),
    logins: List[str] = typer.Argument(..., help="Logins of the users to remove."),
) -> None:
    """Remove a list of users from an existent group, admins are kept."""
    groups = ctx.obj["deps"].groups
    with exit_on_error():
        group = groups.remove_users(group_id, logins)
    views.print_group(group)


@app.command()
def show(ctx: typer.Context, group_id: str) -> None:
    """Print the information of a group."""
    groups = ctx.obj["deps"].groups
    with exit_on_error():
        group = groups.get(group_id)
    views.print_group(group)


@app.command()
def delete(ctx: typer.Context, group_id: str) -> None:
    """Remove a group and all its pads."""
    groups = ctx.obj["deps"].groups
    with exit_on_error():
        group = groups.delete(group_id)
    print(f"Deleted group {group.name} and its {len(group.pads)} pads")


if __name__ == "__main__":
    app()
