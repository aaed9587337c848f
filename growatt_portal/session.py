"""Credentials and session state held by a portal client."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
import hashlib

from .const import DEFAULT_SESSION_DURATION


def hash_password(password: str) -> str:
    """
    Return the value the portal expects in the ``passwordCrc`` field.

    This is the lowercase hex MD5 digest of the UTF-8 encoded password.
    """
    return hashlib.md5(password.encode("utf-8")).hexdigest()  # noqa: S324


@dataclass
class Credentials:
    """Account credentials kept in memory for silent re-login."""

    username: str
    password: str = field(repr=False)


@dataclass
class SessionState:
    """Login state of one client instance."""

    duration: timedelta = DEFAULT_SESSION_DURATION
    is_logged_in: bool = False
    token: str | None = field(default=None, repr=False)
    expires_at: datetime | None = None

    def is_valid(self) -> bool:
        """Return True while the expiry timestamp lies in the future."""
        if self.expires_at is None:
            return False
        return datetime.now(tz=UTC) < self.expires_at

    def mark_logged_in(self, token: str | None = None) -> None:
        """Record a successful login starting a fresh session window."""
        self.is_logged_in = True
        self.expires_at = datetime.now(tz=UTC) + self.duration
        if token is not None:
            self.token = token

    def mark_logged_out(self) -> None:
        """Clear the login flag and expiry; the token is kept."""
        self.is_logged_in = False
        self.expires_at = None
