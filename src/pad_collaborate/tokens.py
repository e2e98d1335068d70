"""Define the issuer of the invitation tokens.

Tokens live only in the memory of the process, they are not persisted nor
shared between processes.
"""

import logging
import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from .exceptions import NotFoundError, ValidationError

Clock = Callable[[], datetime]

log = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(timezone.utc)


class TokenIssuer:
    """Issue short lived tokens bound to a payload.

    Expired tokens are treated as invalid as soon as they expire, and they are
    removed from memory on the next `sweep`, which runs on every `issue`. The
    token maps are guarded by a lock so the issuer can be shared by threads.

    Args:
        duration: Validity of the tokens in minutes.
        clock: Function that returns the current time.
    """

    def __init__(self, duration: float = 60, clock: Clock = utc_now) -> None:
        """Initialize the token maps."""
        if duration <= 0:
            raise ValidationError("The token duration must be positive.", "duration")
        self.duration = timedelta(minutes=duration)
        self.clock = clock
        self._payloads: Dict[str, Any] = {}
        self._expirations: Dict[str, datetime] = {}
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        """Return a string that represents the object."""
        return f"TokenIssuer(duration={self.duration}, tokens={len(self)})"

    def __len__(self) -> int:
        """Return the number of tokens kept in memory."""
        return len(self._payloads)

    def __enter__(self) -> "TokenIssuer":
        """Start using the issuer."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Release the tokens."""
        self.shutdown()

    def issue(self, payload: Any) -> str:
        """Create a new token bound to payload.

        Raises:
            ValidationError: if there is no payload.
        """
        if payload is None:
            raise ValidationError("A token needs a payload.", "payload")
        with self._lock:
            self.sweep()

            token = secrets.token_urlsafe(32)
            while token in self._payloads:
                token = secrets.token_urlsafe(32)

            self._payloads[token] = payload
            self._expirations[token] = self.clock() + self.duration
        log.info("Issued a new invitation token")
        return token

    def is_valid(self, token: str) -> bool:
        """Check if the token exists and has not expired.

        Unknown and expired tokens can't be told apart.
        """
        with self._lock:
            expiration: Optional[datetime] = self._expirations.get(token)
            if token not in self._payloads or expiration is None:
                return False
            return self.clock() < expiration

    def payload(self, token: str) -> Any:
        """Return the payload bound to a valid token.

        Raises:
            NotFoundError: if the token is unknown or has expired.
        """
        with self._lock:
            if not self.is_valid(token):
                raise NotFoundError("The token is not valid.")
            return self._payloads[token]

    def pop(self, token: str) -> Any:
        """Return the payload bound to a valid token and forget the token.

        Raises:
            NotFoundError: if the token is unknown or has expired.
        """
        with self._lock:
            payload = self.payload(token)
            del self._payloads[token]
            del self._expirations[token]
        log.debug("Consumed an invitation token")
        return payload

    def sweep(self) -> int:
        """Remove the expired tokens from memory.

        Returns:
            Number of tokens removed.
        """
        now = self.clock()
        with self._lock:
            expired = [
                token
                for token, expiration in self._expirations.items()
                if now >= expiration
            ]
            for token in expired:
                self._payloads.pop(token, None)
                self._expirations.pop(token, None)
        if expired:
            log.debug(f"Removed {len(expired)} expired tokens")
        return len(expired)

    def shutdown(self) -> None:
        """Forget all the tokens."""
        with self._lock:
            self._payloads.clear()
            self._expirations.clear()
