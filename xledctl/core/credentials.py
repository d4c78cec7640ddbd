"""Process-wide holder for the current session token."""

from __future__ import annotations

from xledctl.core.locks import RWLock
from xledctl.core.model import Token


class CredentialStore:
    def __init__(self) -> None:
        self._lock = RWLock()
        self._token: Token | None = None

    def get(self) -> Token | None:
        with self._lock.read():
            return self._token

    def set(self, token: Token) -> None:
        with self._lock.write():
            self._token = token

    def commit(self, token: Token) -> bool:
        """Store `token` only if the slot is empty or still holds the same session.

        Returns False when a newer login already replaced the token.
        """
        with self._lock.write():
            if self._token is not None and self._token.string != token.string:
                return False
            self._token = token
            return True
