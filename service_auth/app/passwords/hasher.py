"""
Password hashing and verification using Argon2id.
"""

from typing import Optional

from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError, VerifyMismatchError

from shared.errors import InternalFailureError, InvalidInputError
from shared.logging import get_logger


class PasswordHasher:
    """Hashes passwords into self-describing PHC strings and checks them."""

    def __init__(self, time_cost: int = 3, memory_cost: int = 65536, parallelism: int = 4):
        self.hasher = Argon2Hasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )
        self.logger = get_logger("auth.passwords")

    @classmethod
    def from_config(cls, config) -> "PasswordHasher":
        return cls(
            time_cost=config.argon2_time_cost,
            memory_cost=config.argon2_memory_cost,
            parallelism=config.argon2_parallelism,
        )

    def hash(self, password: str) -> str:
        """
        Hash a password with a fresh random salt.

        Args:
            password: Plain text password

        Returns:
            Argon2 hash string including algorithm parameters and salt

        Raises:
            InvalidInputError: If the password is empty
            InternalFailureError: If the hashing primitive fails
        """
        if not password:
            raise InvalidInputError("password must not be empty", details={"field": "password"})

        try:
            return self.hasher.hash(password)
        except HashingError as e:
            self.logger.error("Failed to hash password", error=str(e))
            raise InternalFailureError("hashing_failed") from e

    def verify(self, password: str, encoded: Optional[str]) -> bool:
        """
        Check a password against an encoded hash.

        Args:
            password: Plain text password
            encoded: Argon2 hash string produced by ``hash``

        Returns:
            True if the password matches, False otherwise

        Raises:
            InvalidInputError: If either field is empty or the hash cannot be parsed
        """
        if not password or not encoded:
            raise InvalidInputError(
                "password and hash must not be empty",
                details={"fields": [name for name, value in (("password", password), ("hash", encoded)) if not value]}
            )

        try:
            return self.hasher.verify(encoded, password)
        except VerifyMismatchError:
            return False
        except InvalidHashError as e:
            raise InvalidInputError("hash is not a valid encoded password hash", details={"field": "hash"}) from e
        except VerificationError as e:
            self.logger.warning("Password verification error", error=str(e))
            return False
