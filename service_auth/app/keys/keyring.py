"""
Signing key ring for HMAC token issuance and verification.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from shared.logging import get_logger

DEFAULT_KID = "default"
DEV_SECRET = "dev-secret-change-me"

logger = get_logger("auth.keyring")


@dataclass(frozen=True)
class Secret:
    """A signing secret and the kid that names it."""

    kid: str
    value: bytes

    def __repr__(self) -> str:
        return f"Secret(kid={self.kid!r})"


@dataclass(frozen=True)
class KeyRing:
    """Ordered, immutable set of signing secrets plus the active kid.

    Order is configuration order. Lookups are first-match, so a duplicated
    kid always resolves to its first occurrence. Nothing here raises: an
    unknown active kid falls back to the first secret, and an empty ring
    signs with an empty key.
    """

    secrets: Tuple[Secret, ...]
    active_kid: str = DEFAULT_KID

    @property
    def kids(self) -> List[str]:
        return [secret.kid for secret in self.secrets]

    def find(self, kid: str) -> Optional[Secret]:
        """Return the first secret configured under ``kid``."""
        for secret in self.secrets:
            if secret.kid == kid:
                return secret
        return None

    def resolve_active(self) -> bytes:
        """Return the secret used to sign new tokens."""
        secret = self.find(self.active_kid)
        if secret is not None:
            return secret.value
        if self.secrets:
            return self.secrets[0].value
        return b""

    def candidates_for(self, kid_hint: Optional[str]) -> List[bytes]:
        """Return the secrets to try, in order, when verifying a token.

        A known kid narrows the search to exactly that secret. An absent or
        unknown kid widens it to every configured secret.
        """
        if kid_hint is not None:
            secret = self.find(kid_hint)
            if secret is not None:
                return [secret.value]
        return [secret.value for secret in self.secrets]

    @classmethod
    def from_config(cls, config) -> "KeyRing":
        """Build the ring from service configuration."""
        return load_keyring(
            config.jwt_secrets,
            config.jwt_secret,
            config.jwt_active_kid,
        )


def parse_secrets(raw: str) -> List[Secret]:
    """Parse ``kid1:secret1,kid2:secret2`` into secrets.

    Each part is split on its first colon; parts with no colon, or with an
    empty kid or secret after trimming, are dropped.
    """
    secrets = []
    for part in raw.split(","):
        kid, sep, value = part.partition(":")
        kid, value = kid.strip(), value.strip()
        if not sep or not kid or not value:
            continue
        secrets.append(Secret(kid=kid, value=value.encode("utf-8")))
    return secrets


def _single_secret_ring(jwt_secret: Optional[str]) -> KeyRing:
    if jwt_secret is None:
        logger.warning("No signing secret configured, using development placeholder")
        jwt_secret = DEV_SECRET
    return KeyRing(
        secrets=(Secret(kid=DEFAULT_KID, value=jwt_secret.encode("utf-8")),),
        active_kid=DEFAULT_KID,
    )


def load_keyring(
    jwt_secrets: Optional[str],
    jwt_secret: Optional[str] = None,
    jwt_active_kid: Optional[str] = None,
) -> KeyRing:
    """Build a key ring from the multi-secret and single-secret settings.

    The multi-secret list wins when it yields at least one pair. Otherwise
    the ring holds one ``default`` secret taken from ``jwt_secret`` (or the
    development placeholder), and ``jwt_active_kid`` is not consulted.
    """
    if jwt_secrets is None:
        return _single_secret_ring(jwt_secret)

    secrets = parse_secrets(jwt_secrets)
    if not secrets:
        logger.warning("JWT_SECRETS yielded no valid kid:secret pairs, falling back to JWT_SECRET")
        return _single_secret_ring(jwt_secret)

    active_kid = jwt_active_kid or secrets[0].kid
    ring = KeyRing(secrets=tuple(secrets), active_kid=active_kid)

    if ring.find(active_kid) is None:
        logger.warning(
            "Active kid not found in key ring, signing with first configured secret",
            active_kid=active_kid,
            fallback_kid=secrets[0].kid,
        )

    kids = ring.kids
    if len(set(kids)) != len(kids):
        logger.warning("Duplicate kids in key ring, first occurrence wins", kids=kids)

    return ring
