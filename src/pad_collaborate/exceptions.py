"""Define program exceptions."""

from typing import List, Optional


class PadCollaborateError(Exception):
    """Model the base exception of the program."""


class ValidationError(PadCollaborateError):
    """Model the exception of receiving malformed or missing input."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(PadCollaborateError):
    """Model the exception of not finding something."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class ReferentialIntegrityError(PadCollaborateError):
    """Model the exception of referencing entities that don't exist."""

    def __init__(self, message: str, keys: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.keys = keys or []


class AuthenticationError(PadCollaborateError):
    """Model the exception of credentials that don't match."""


class StoreError(PadCollaborateError):
    """Model the exception of problems when accessing the key store."""
