"""Test the pad command line interface."""

import pytest
from typer.testing import CliRunner

from pad_collaborate.entrypoints.cli import app


def last_line(output: str) -> str:
    """Return the last printed line of the command output."""
    return output.strip().splitlines()[-1]


@pytest.fixture(name="group_id")
def group_id_(cli_runner: CliRunner) -> str:
    """Create a private group with an admin through the command line."""
    cli_runner.invoke(app, ["user", "add", "admin", "--password", "admin_password"])
    result = cli_runner.invoke(
        app,
        [
            "group",
            "add",
            "developers",
            "--admin",
            "admin",
            "--visibility",
            "private",
            "--password",
            "group_secret",
            "--readonly",
        ],
    )
    assert result.exit_code == 0
    return last_line(result.stdout)


def test_pad_add_and_show_inherited_values(cli_runner: CliRunner, group_id: str) -> None:
    """
    Given: A private readonly group
    When: adding a pad without its own attributes and showing it
    Then: The group values are shown, hiding the password
    """
    pad_id = last_line(cli_runner.invoke(app, ["pad", "add", "Doc", group_id]).stdout)

    result = cli_runner.invoke(app, ["pad", "show", pad_id])

    assert result.exit_code == 0
    assert "private" in result.stdout
    assert "***" in result.stdout
    assert "group_secret" not in result.stdout


def test_pad_add_to_unknown_group(cli_runner: CliRunner) -> None:
    """
    Given: An empty store
    When: adding a pad to a group that doesn't exist
    Then: The command fails with the not found code
    """
    result = cli_runner.invoke(app, ["pad", "add", "Doc", "missing"])

    assert result.exit_code == 404
    assert "group missing not found" in result.output


def test_pad_add_restricted_with_unknown_user(
    cli_runner: CliRunner, group_id: str
) -> None:
    """
    Given: A group
    When: adding a restricted pad for a user that doesn't exist
    Then: The command fails with a referential integrity error
    """
    result = cli_runner.invoke(
        app,
        ["pad", "add", "Doc", group_id, "--visibility", "restricted", "--user", "nouser"],
    )

    assert result.exit_code == 2
    assert "some users not found" in result.output


def test_pad_delete(cli_runner: CliRunner, group_id: str) -> None:
    """
    Given: A pad of a group
    When: deleting it
    Then: The pad is removed from the store and from the group
    """
    pad_id = last_line(cli_runner.invoke(app, ["pad", "add", "Doc", group_id]).stdout)

    result = cli_runner.invoke(app, ["pad", "delete", pad_id])

    assert result.exit_code == 0
    assert "Deleted pad Doc" in result.stdout
    assert pad_id not in cli_runner.invoke(app, ["group", "show", group_id]).stdout
