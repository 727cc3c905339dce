"""
Token package.

Builds and parses the compact signed tokens handed out by the service:
header (alg, kid), claims (sub, exp) and an HMAC signature, each
base64url encoded and joined with dots.
"""

from .codec import Claims, DEFAULT_LIFETIME_SECONDS, HMAC_ALGORITHMS, TokenCodec, VerificationFailure

__all__ = ["Claims", "DEFAULT_LIFETIME_SECONDS", "HMAC_ALGORITHMS", "TokenCodec", "VerificationFailure"]
