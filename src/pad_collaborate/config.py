"""Define the configuration of the program."""

import logging
import secrets
from pathlib import Path
from typing import Any, Optional

from goodconf import Field, GoodConf
from pydantic import field_validator

log = logging.getLogger(__name__)

DEFAULT_TOKEN_DURATION = 60.0


class Settings(GoodConf):
    """Configure the pad collaborate backend."""

    model_config = {
        "file_env_var": "PAD_COLLABORATE_CONFIG",
        "default_files": ["~/.config/pad_collaborate/config.yaml"],
    }

    store_path: Optional[Path] = Field(
        default=None,
        description="YAML file where the records are stored, in memory if empty.",
    )
    token_duration: float = Field(
        default=DEFAULT_TOKEN_DURATION,
        description="Minutes an invitation token is valid.",
    )
    bcrypt_rounds: int = Field(
        default=12, description="Work factor of the password hashing."
    )
    password_min: int = Field(default=8, description="Minimum password length.")
    password_max: int = Field(default=72, description="Maximum password length.")
    session_secret: str = Field(
        initial=lambda: secrets.token_urlsafe(32),
        default="",
        description="Secret used to sign the sessions.",
    )

    @field_validator("token_duration", mode="before")
    @classmethod
    def default_token_duration(cls, value: Any) -> float:
        """Fall back to the default duration if the value is not a positive number."""
        try:
            duration = float(value)
        except (TypeError, ValueError):
            log.warning(f"Invalid token duration {value}, using the default one")
            return DEFAULT_TOKEN_DURATION
        if duration <= 0:
            log.warning(f"Token duration must be positive, using {DEFAULT_TOKEN_DURATION}")
            return DEFAULT_TOKEN_DURATION
        return duration

    def get(self, option: str) -> Any:
        """Return the value of a configuration option.

        Raises:
            KeyError: if the option doesn't exist.
        """
        if option not in type(self).model_fields:
            raise KeyError(f"There is no configuration option {option}")
        return getattr(self, option)
