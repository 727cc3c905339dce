"""
Signed token issuance and verification over a key ring.
"""

import json
import time
from enum import Enum
from typing import Any, Callable, NoReturn, Optional

import jwt
from jwt.algorithms import HMACAlgorithm
from jwt.utils import force_bytes
from pydantic import BaseModel, Field, ValidationError

from shared.errors import InternalFailureError, InvalidInputError, UnauthorizedError
from shared.logging import get_logger
from ..keys import KeyRing

DEFAULT_LIFETIME_SECONDS = 3600
HMAC_ALGORITHMS = {
    "HS256": HMACAlgorithm.SHA256,
    "HS384": HMACAlgorithm.SHA384,
    "HS512": HMACAlgorithm.SHA512,
}


class RingHMACAlgorithm(HMACAlgorithm):
    """HMAC that also accepts an empty key.

    An empty ring resolves to ``b""``; signing with it is degraded but must
    still produce a token rather than fail.
    """

    def prepare_key(self, key):
        key_bytes = force_bytes(key)
        if not key_bytes:
            return key_bytes
        return super().prepare_key(key_bytes)


class Claims(BaseModel):
    """Claims carried by a token: subject and expiry (epoch seconds)."""

    sub: str
    exp: int = Field(ge=0)

    @property
    def subject(self) -> str:
        return self.sub

    @property
    def expires_at(self) -> int:
        return self.exp


class VerificationFailure(str, Enum):
    """Why a token was rejected. Logged and counted, never returned."""

    EMPTY_TOKEN = "empty_token"
    MALFORMED_TOKEN = "malformed_token"
    MALFORMED_HEADER = "malformed_header"
    NO_MATCHING_KEY = "no_matching_key"
    INVALID_CLAIMS = "invalid_claims"
    EXPIRED = "expired"


class TokenCodec:
    """Issues and verifies HMAC-signed compact JWS tokens.

    Issuance signs with the ring's active secret and names it in the ``kid``
    header. Verification reads the ``kid`` hint without trusting it, asks the
    ring for candidate secrets and tries them in order. The first secret
    whose signature check passes decides the outcome; expiry is then checked
    against this codec's clock and no further secrets are tried.
    """

    def __init__(
        self,
        keyring: KeyRing,
        algorithm: str = "HS256",
        clock: Callable[[], float] = time.time,
        metrics=None,
    ):
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {algorithm}")

        self.keyring = keyring
        self.algorithm = algorithm
        self.clock = clock
        self.metrics = metrics
        self.logger = get_logger("auth.tokens")
        self._jws = jwt.PyJWS(algorithms=[])
        self._jws.register_algorithm(algorithm, RingHMACAlgorithm(HMAC_ALGORITHMS[algorithm]))

    def _now(self) -> int:
        try:
            return int(self.clock())
        except (OSError, OverflowError, ValueError) as e:
            self.logger.error("System clock unreadable", error=str(e))
            raise InternalFailureError("clock_unreadable", details={"error": str(e)}) from e

    def issue(self, subject: str, lifetime_seconds: Optional[int] = None) -> str:
        """Issue a token for ``subject`` valid for ``lifetime_seconds``."""
        if not subject:
            raise InvalidInputError("sub must not be empty", details={"field": "sub"})
        if lifetime_seconds is None:
            lifetime_seconds = DEFAULT_LIFETIME_SECONDS
        if lifetime_seconds < 0:
            raise InvalidInputError("exp_seconds must not be negative", details={"field": "exp_seconds"})

        claims = Claims(sub=subject, exp=self._now() + lifetime_seconds)
        kid = self.keyring.active_kid

        try:
            token = self._jws.encode(
                claims.model_dump_json().encode("utf-8"),
                self.keyring.resolve_active(),
                algorithm=self.algorithm,
                headers={"kid": kid},
            )
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            self.logger.error("Token signing failed", kid=kid, error=str(e), exc_info=True)
            raise InternalFailureError("signing_failed", details={"kid": kid}) from e

        self.logger.info("Token issued", kid=kid, exp=claims.exp)
        if self.metrics:
            self.metrics.record_token_issued(kid)
        return token

    def verify(self, token: Any) -> Claims:
        """Verify ``token`` and return its claims.

        Raises UnauthorizedError for every rejection, whatever the cause.
        """
        if not token:
            self._reject(VerificationFailure.EMPTY_TOKEN)
        if not isinstance(token, str):
            self._reject(VerificationFailure.MALFORMED_TOKEN, token_type=type(token).__name__)

        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as e:
            self._reject(VerificationFailure.MALFORMED_HEADER, error=str(e))

        kid_hint = header.get("kid")
        candidates = self.keyring.candidates_for(kid_hint)

        attempts = 0
        for secret in candidates:
            attempts += 1
            try:
                payload = self._jws.decode(token, secret, algorithms=[self.algorithm])
            except jwt.PyJWTError as e:
                self.logger.debug(
                    "Candidate key rejected token",
                    kid_hint=kid_hint,
                    attempt=attempts,
                    error=str(e),
                )
                continue

            try:
                claims = Claims.model_validate(json.loads(payload))
            except (ValueError, ValidationError) as e:
                self._reject(VerificationFailure.INVALID_CLAIMS, attempts, kid_hint=kid_hint, error=str(e))

            if claims.exp < self._now():
                self._reject(VerificationFailure.EXPIRED, attempts, kid_hint=kid_hint, exp=claims.exp)

            self.logger.debug("Token verified", kid_hint=kid_hint, attempts=attempts)
            if self.metrics:
                self.metrics.record_token_verification("valid", attempts)
            return claims

        self._reject(
            VerificationFailure.NO_MATCHING_KEY,
            attempts,
            kid_hint=kid_hint,
            alg=header.get("alg"),
            kid_known=kid_hint is not None and self.keyring.find(kid_hint) is not None,
        )

    def _reject(self, reason: VerificationFailure, attempts: Optional[int] = None, **context) -> NoReturn:
        self.logger.info("Token rejected", reason=reason.value, attempts=attempts, **context)
        if self.metrics:
            self.metrics.record_token_verification(reason.value, attempts)
        raise UnauthorizedError(reason, details={"attempts": attempts, **context})
