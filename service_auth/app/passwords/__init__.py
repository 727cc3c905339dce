"""
Password hashing package.

Delegates to Argon2id (argon2-cffi). Encoded hashes are PHC strings that
carry their own parameters and salt, so verification needs no extra state.
"""

from .hasher import PasswordHasher

__all__ = ["PasswordHasher"]
