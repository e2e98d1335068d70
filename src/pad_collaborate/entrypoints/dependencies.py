"""Configure the dependencies of the program."""

import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict  # noqa: E0611

from ..adapters import KeyStore, MemoryKeyStore, YAMLKeyStore
from ..config import Settings
from ..model import GroupModel, PadModel, UserModel
from ..tokens import TokenIssuer

log = logging.getLogger(__name__)


class Dependencies(BaseModel):
    """Configure the dependencies of the program."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    settings: Settings
    store: KeyStore
    users: UserModel
    groups: GroupModel
    pads: PadModel
    tokens: TokenIssuer


def load_settings(config_file: Optional[Path] = None) -> Settings:
    """Load the program configuration.

    Args:
        config_file: YAML configuration file. If it's not set, the file is
            searched in the `PAD_COLLABORATE_CONFIG` environment variable and in
            the default locations.
    """
    settings = Settings()
    if config_file is None:
        settings.load()
    else:
        settings.load(str(config_file.expanduser()))
    return settings


def configure_dependencies(settings: Settings) -> Dependencies:
    """Configure the program dependencies.

    Args:
        settings: Program configuration.
    """
    store: KeyStore
    if settings.store_path is None:
        log.debug("Using an in memory store")
        store = MemoryKeyStore()
    else:
        store = YAMLKeyStore(settings.store_path)

    return Dependencies(
        settings=settings,
        store=store,
        users=UserModel(
            store,
            bcrypt_rounds=settings.bcrypt_rounds,
            password_min=settings.password_min,
            password_max=settings.password_max,
        ),
        groups=GroupModel(store),
        pads=PadModel(store),
        tokens=TokenIssuer(duration=settings.token_duration),
    )
