"""User command line interface definition."""

from typing import Optional

import typer

from .. import views
from . import exit_on_error

app = typer.Typer()


@app.command()
def add(
    ctx: typer.Context,
    login: str = typer.Argument(..., help="Unique login of the user"),
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True
    ),
    email: Optional[str] = typer.Option(None, help="Email of the user"),
    firstname: Optional[str] = typer.Option(None, help="First name of the user"),
    lastname: Optional[str] = typer.Option(None, help="Last name of the user"),
) -> None:
    """Register a new user."""
    users = ctx.obj["deps"].users
    with exit_on_error():
        user = users.create(
            {
                "login": login,
                "password": password,
                "email": email,
                "firstname": firstname,
                "lastname": lastname,
            }
        )
    views.print_model(user.profile)


@app.command()
def update(
    ctx: typer.Context,
    login: str = typer.Argument(..., help="Login of the user"),
    password: Optional[str] = typer.Option(None, help="New password"),
    email: Optional[str] = typer.Option(None, help="Email of the user"),
    firstname: Optional[str] = typer.Option(None, help="First name of the user"),
    lastname: Optional[str] = typer.Option(None, help="Last name of the user"),
) -> None:
    """Change the attributes of a user."""
    users = ctx.obj["deps"].users
    params = {
        key: value
        for key, value in [
            ("password", password),
            ("email", email),
            ("firstname", firstname),
            ("lastname", lastname),
        ]
        if value is not None
    }
    with exit_on_error():
        user = users.update(login, params)
    views.print_model(user.profile)


@app.command()
def show(
    ctx: typer.Context,
    login: str = typer.Argument(..., help="Login of the user"),
) -> None:
    """Print the information of a user."""
    users = ctx.obj["deps"].users
    with exit_on_error():
        user = users.get(login)
    views.print_model(user.profile)


@app.command()
def delete(
    ctx: typer.Context,
    login: str = typer.Argument(..., help="Login of the user"),
) -> None:
    """Remove a user that is not part of any group."""
    users = ctx.obj["deps"].users
    with exit_on_error():
        users.delete(login)
    print(f"Deleted user {login}")
