"""Store the classes and fixtures used throughout the tests."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator

import pytest
from typer.testing import CliRunner

from pad_collaborate.adapters import MemoryKeyStore
from pad_collaborate.model import Group, GroupModel, PadModel, User, UserModel
from pad_collaborate.tokens import TokenIssuer


class FakeClock:
    """Return a time that only moves when the tests ask for it."""

    def __init__(self) -> None:
        """Start the clock at a fixed date."""
        self.now = datetime(2022, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        """Return the current time."""
        return self.now

    def advance(self, minutes: float) -> None:
        """Move the clock forward."""
        self.now += timedelta(minutes=minutes)


@pytest.fixture(name="store")
def store_() -> MemoryKeyStore:
    """Create an empty key store."""
    return MemoryKeyStore()


@pytest.fixture(name="users")
def users_(store: MemoryKeyStore) -> UserModel:
    """Create the user model with a fast password hashing."""
    return UserModel(store, bcrypt_rounds=4)


@pytest.fixture(name="groups")
def groups_(store: MemoryKeyStore) -> GroupModel:
    """Create the group model."""
    return GroupModel(store)


@pytest.fixture(name="pads")
def pads_(store: MemoryKeyStore) -> PadModel:
    """Create the pad model."""
    return PadModel(store)


@pytest.fixture(name="admin")
def admin_(users: UserModel) -> User:
    """Create the admin user."""
    return users.create(
        {"login": "admin", "password": "admin_password", "email": "admin@example.org"}
    )


@pytest.fixture(name="developer")
def developer_(users: UserModel) -> User:
    """Create the developer user."""
    return users.create(
        {
            "login": "developer",
            "password": "developer_password",
            "email": "developer@example.org",
        }
    )


@pytest.fixture(name="group")
def group_(groups: GroupModel, admin: User, developer: User) -> Group:
    """Create a group with an admin and a developer."""
    return groups.create(
        {
            "name": "developers",
            "admins": [admin.login],
            "users": [developer.login],
            "visibility": "public",
        }
    )


@pytest.fixture(name="clock")
def clock_() -> FakeClock:
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture(name="tokens")
def tokens_(clock: FakeClock) -> Iterator[TokenIssuer]:
    """Create the token issuer."""
    with TokenIssuer(duration=60, clock=clock) as tokens:
        yield tokens


@pytest.fixture(name="work_dir")
def work_dir_(tmp_path: Path) -> Path:
    """Create the work directory for the tests."""
    (tmp_path / "config.yaml").write_text("bcrypt_rounds: 4\n", encoding="utf-8")
    return tmp_path


@pytest.fixture(name="cli_runner")
def runner_(work_dir: Path) -> CliRunner:
    """Configure the typer cli runner."""
    return CliRunner(
        env={
            "PAD_COLLABORATE_STORE": str(work_dir / "store.yaml"),
            "PAD_COLLABORATE_CONFIG": str(work_dir / "config.yaml"),
        },
    )
