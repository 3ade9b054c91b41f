from __future__ import annotations

import base64
import binascii
import logging
from typing import Iterable, Mapping, Optional, Protocol

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


class CredentialsProvider(Protocol):
    def password_hash_for(self, identifier: str) -> Optional[str]:
        raise NotImplementedError


class StaticCredentialsProvider(CredentialsProvider):
    """Allow-list of admin accounts, hashed once at construction."""

    def __init__(self, credentials: Mapping[str, str]):
        self._hashes = {str(k): generate_password_hash(str(v)) for k, v in credentials.items()}

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> "StaticCredentialsProvider":
        return cls(dict(pairs))

    def password_hash_for(self, identifier: str) -> Optional[str]:
        return self._hashes.get(identifier)


def parse_credentials(raw: str) -> list[tuple[str, str]]:
    """Parse ``"id:secret,id2:secret2"`` into pairs; malformed items are ignored."""

    pairs: list[tuple[str, str]] = []
    for item in (raw or "").split(","):
        identifier, sep, secret = item.strip().partition(":")
        if sep and identifier and secret:
            pairs.append((identifier, secret))
    return pairs


class AuthService:
    """Admin credential check and bearer tokens.

    Warning: tokens are base64("identifier:secret"). Verification decodes the
    token and re-checks the pair; there is no signature and no expiry.
    """

    def __init__(self, credentials: CredentialsProvider):
        self._credentials = credentials

    def check_credentials(self, identifier: str, secret: str) -> bool:
        if not identifier or not secret:
            return False
        password_hash = self._credentials.password_hash_for(identifier)
        if not password_hash:
            return False
        return check_password_hash(password_hash, secret)

    def issue_token(self, identifier: str, secret: str) -> str:
        if not self.check_credentials(identifier, secret):
            logger.info("Rejected admin login for %r", identifier)
            raise UnauthorizedError("Invalid credentials")
        logger.info("Admin %s logged in", identifier)
        return base64.b64encode(f"{identifier}:{secret}".encode("utf-8")).decode("ascii")

    def verify_token(self, token: Optional[str]) -> Optional[str]:
        """Identifier behind a valid token, None otherwise."""

        if not token:
            return None
        try:
            decoded = base64.b64decode(token.encode("ascii"), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeError, ValueError):
            return None

        identifier, sep, secret = decoded.partition(":")
        if not sep or not self.check_credentials(identifier, secret):
            return None
        return identifier

    def authorize_header(self, header: Optional[str]) -> str:
        """Validate an ``Authorization`` header value (``Bearer <token>``)."""

        scheme, _, token = (header or "").strip().partition(" ")
        if scheme.lower() != "bearer":
            raise UnauthorizedError("Unauthorized")
        identifier = self.verify_token(token.strip())
        if not identifier:
            raise UnauthorizedError("Unauthorized")
        return identifier
