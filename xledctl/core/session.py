"""Session token acquisition and opportunistic re-validation."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from xledctl.core.credentials import CredentialStore
from xledctl.core.errors import AuthError, TransportError, VerifyError
from xledctl.core.model import Token
from xledctl.transports.base import HttpTransport

# Fixed challenge; the device does not require it to be random.
LOGIN_CHALLENGE = "AAECAwQFBgcICQoLDA0ODxAREhMUFRYXGBkaGxwdHh8="
VERIFY_OK = 1000
DEFAULT_VERIFY_INTERVAL_S = 10.0
LOGGER = logging.getLogger(__name__)


class SessionManager:
    """Owns the login handshake and keeps the stored token valid.

    `get_token` is the only entry point other components should use. It
    skips the verify round-trip while the last successful check is younger
    than `verify_interval_s`, and falls back to a fresh login when the device
    no longer accepts the stored token.
    """

    def __init__(
        self,
        transport: HttpTransport,
        *,
        store: CredentialStore | None = None,
        verify_interval_s: float = DEFAULT_VERIFY_INTERVAL_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.transport = transport
        self.store = store or CredentialStore()
        self.verify_interval_s = verify_interval_s
        self._clock = clock

    def login(self) -> Token:
        try:
            response = self.transport.request(
                "POST",
                "login",
                json_body={"challenge": LOGIN_CHALLENGE},
            )
        except TransportError as exc:
            raise AuthError(f"Login request failed: {exc}") from exc

        raw_token = response.get("authentication_token")
        if not isinstance(raw_token, str) or not raw_token:
            raise AuthError("Login response did not contain an authentication_token")

        token = Token.from_string(raw_token)
        self.store.set(token)

        try:
            token = self.verify(token)
        except VerifyError as exc:
            raise AuthError(f"Login verification failed: {exc}") from exc
        LOGGER.debug("Logged in with a new session token")
        return token

    def verify(self, token: Token) -> Token:
        now = self._clock()
        if token.last_verified is not None and now - token.last_verified < self.verify_interval_s:
            return token

        # Commit the stamp before the network call so concurrent callers skip
        # their own verify instead of racing this one.
        token = token.stamped(now)
        self.store.commit(token)

        try:
            response = self.transport.request("GET", "verify", token=token.string)
        except TransportError as exc:
            raise VerifyError(f"Verify request failed: {exc}") from exc

        code = response.get("code")
        if code != VERIFY_OK:
            raise VerifyError(f"Verify returned error status code {code}")
        return token

    def get_token(self) -> Token:
        token = self.store.get()
        if token is not None:
            try:
                return self.verify(token)
            except VerifyError as exc:
                LOGGER.info("Session token rejected (%s); logging in again", exc)
        return self.login()
