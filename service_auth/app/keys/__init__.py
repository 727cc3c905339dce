"""
Signing key package.

Holds the rotating set of HMAC signing secrets, each named by a key id
(kid), and the rules for choosing which secret signs new tokens and which
secrets a verifier should try.

Key points:
- The ring is built once at startup and never mutated; request handlers
  share it without locking.
- Prefer kid selection when the token names a configured key.
"""

from .keyring import DEFAULT_KID, DEV_SECRET, KeyRing, Secret, load_keyring, parse_secrets

__all__ = ["DEFAULT_KID", "DEV_SECRET", "KeyRing", "Secret", "load_keyring", "parse_secrets"]
