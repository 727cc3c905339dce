"""
Auth service: password hashing and signed tokens.
"""

import time
from typing import Callable, Optional

from starlette.concurrency import run_in_threadpool

from shared.base_service import BaseService
from shared.config import AuthConfig
from shared.logging import set_subject_context
from .keys import KeyRing
from .models import (
    Claims,
    HashRequest,
    HashResponse,
    KeyRingResponse,
    PasswordVerificationRequest,
    PasswordVerificationResponse,
    TokenIssueRequest,
    TokenIssueResponse,
    TokenVerificationRequest,
)
from .passwords import PasswordHasher
from .tokens import TokenCodec


class AuthService(BaseService):
    """Auth service implementation."""

    def __init__(self, config: Optional[AuthConfig] = None, clock: Callable[[], float] = time.time):
        super().__init__("auth", config)

        # Loaded once; shared read-only by every request
        self.keyring = KeyRing.from_config(self.config)
        self.token_codec = TokenCodec(
            self.keyring,
            algorithm=self.config.jwt_algorithm,
            clock=clock,
            metrics=self.metrics,
        )
        self.password_hasher = PasswordHasher.from_config(self.config)

        self.logger.info(
            "Key ring loaded",
            active_kid=self.keyring.active_kid,
            kids=self.keyring.kids,
            algorithm=self.config.jwt_algorithm
        )

        self._setup_auth_routes()

    def _setup_auth_routes(self):
        """Set up auth-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "auth",
                "message": "Auth Service - password hashing and signed tokens",
                "version": "1.0.0"
            }

        @self.app.get("/keys", response_model=KeyRingResponse)
        async def list_keys():
            """Configured kids and the active kid."""
            return KeyRingResponse(active_kid=self.keyring.active_kid, kids=self.keyring.kids)

        @self.app.post("/hash", response_model=HashResponse)
        async def hash_password(request: HashRequest):
            """Password hashing endpoint."""
            with self.metrics.time_operation("password_operation_duration_seconds", operation="hash"):
                encoded = await run_in_threadpool(self.password_hasher.hash, request.password)

            self.metrics.record_password_operation("hash", "ok")
            return HashResponse(hash=encoded)

        @self.app.post("/verify", response_model=PasswordVerificationResponse)
        async def verify_password(request: PasswordVerificationRequest):
            """Password verification endpoint."""
            with self.metrics.time_operation("password_operation_duration_seconds", operation="verify"):
                valid = await run_in_threadpool(self.password_hasher.verify, request.password, request.hash)

            self.metrics.record_password_operation("verify", "valid" if valid else "invalid")
            return PasswordVerificationResponse(valid=valid)

        @self.app.post("/token", response_model=TokenIssueResponse)
        async def issue_token(request: TokenIssueRequest):
            """Token issuance endpoint."""
            set_subject_context(request.sub)
            token = self.token_codec.issue(request.sub, request.exp_seconds)
            return TokenIssueResponse(token=token)

        @self.app.post("/token/verify", response_model=Claims)
        async def verify_token(request: TokenVerificationRequest):
            """Token verification endpoint."""
            claims = self.token_codec.verify(request.token)
            set_subject_context(claims.subject)
            self.logger.info("Token verified", exp=claims.expires_at)
            return claims

    async def _check_dependencies(self):
        """Report key ring state. The service has no network dependencies."""
        return {"keyring": "ok" if self.keyring.secrets else "empty"}


def create_app(config: Optional[AuthConfig] = None, clock: Callable[[], float] = time.time):
    """Create FastAPI application."""
    service = AuthService(config, clock)
    return service.app


def main():
    service = AuthService()
    service.run()


if __name__ == "__main__":
    main()
