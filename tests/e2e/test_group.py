"""Test the group command line interface."""

import pytest
from typer.testing import CliRunner

from pad_collaborate.entrypoints.cli import app


def last_line(output: str) -> str:
    """Return the last printed line of the command output."""
    return output.strip().splitlines()[-1]


@pytest.fixture(name="cli_users")
def cli_users_(cli_runner: CliRunner) -> None:
    """Register the admin and developer users through the command line."""
    for login in ["admin", "developer"]:
        result = cli_runner.invoke(
            app, ["user", "add", login, "--password", f"{login}_password"]
        )
        assert result.exit_code == 0


@pytest.mark.usefixtures("cli_users")
def test_group_add_and_show(cli_runner: CliRunner) -> None:
    """
    Given: Two registered users
    When: adding a group with them and showing it
    Then: The group is shown with its admins and users
    """
    added = cli_runner.invoke(
        app,
        [
            "group",
            "add",
            "developers",
            "--admin",
            "admin",
            "--user",
            "developer",
            "--visibility",
            "public",
        ],
    )
    group_id = last_line(added.stdout)

    result = cli_runner.invoke(app, ["group", "show", group_id])

    assert added.exit_code == 0
    assert result.exit_code == 0
    assert "developers" in result.stdout
    assert "public" in result.stdout
    assert "developer" in result.stdout


def test_group_add_with_unknown_admin(cli_runner: CliRunner) -> None:
    """
    Given: An empty store
    When: adding a group with an admin that doesn't exist
    Then: The command fails with a referential integrity error
    """
    result = cli_runner.invoke(app, ["group", "add", "developers", "--admin", "nobody"])

    assert result.exit_code == 2
    assert "some users not found" in result.output


@pytest.mark.usefixtures("cli_users")
def test_group_add_private_without_password(cli_runner: CliRunner) -> None:
    """
    Given: A registered user
    When: adding a private group without password
    Then: The command fails with a validation error
    """
    result = cli_runner.invoke(
        app, ["group", "add", "secret", "--admin", "admin", "--visibility", "private"]
    )

    assert result.exit_code == 2


@pytest.mark.usefixtures("cli_users")
def test_group_add_users(cli_runner: CliRunner) -> None:
    """
    Given: A group with only an admin
    When: adding a user to it
    Then: The user is a member of the group
    """
    group_id = last_line(
        cli_runner.invoke(app, ["group", "add", "developers", "--admin", "admin"]).stdout
    )

    result = cli_runner.invoke(app, ["group", "add-users", group_id, "developer"])

    assert result.exit_code == 0
    assert group_id in cli_runner.invoke(app, ["user", "show", "developer"]).stdout


@pytest.mark.usefixtures("cli_users")
def test_group_remove_users(cli_runner: CliRunner) -> None:
    """
    Given: A group with an admin and a user
    When: removing the user from it
    Then: The user can be deleted as it's not part of any group
    """
    group_id = last_line(
        cli_runner.invoke(
            app,
            ["group", "add", "developers", "--admin", "admin", "--user", "developer"],
        ).stdout
    )

    result = cli_runner.invoke(app, ["group", "remove-users", group_id, "developer"])

    assert result.exit_code == 0
    assert cli_runner.invoke(app, ["user", "delete", "developer"]).exit_code == 0


@pytest.mark.usefixtures("cli_users")
def test_group_delete_removes_its_pads(cli_runner: CliRunner) -> None:
    """
    Given: A group with a pad
    When: deleting the group
    Then: The group and the pad are removed
    """
    group_id = last_line(
        cli_runner.invoke(app, ["group", "add", "developers", "--admin", "admin"]).stdout
    )
    pad_id = last_line(cli_runner.invoke(app, ["pad", "add", "Doc", group_id]).stdout)

    result = cli_runner.invoke(app, ["group", "delete", group_id])

    assert result.exit_code == 0
    assert "Deleted group developers and its 1 pads" in result.stdout
    assert cli_runner.invoke(app, ["group", "show", group_id]).exit_code == 404
    assert cli_runner.invoke(app, ["pad", "show", pad_id]).exit_code == 404
    assert cli_runner.invoke(app, ["user", "delete", "admin"]).exit_code == 0


def test_group_show_unknown(cli_runner: CliRunner) -> None:
    """
    Given: An empty store
    When: showing a group that doesn't exist
    Then: The command fails with the not found code
    """
    result = cli_runner.invoke(app, ["group", "show", "missing"])

    assert result.exit_code == 404
