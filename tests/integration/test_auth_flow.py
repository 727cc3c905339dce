"""
Integration tests for the token lifecycle across key rotation.

Each phase builds a fresh service from configuration, the way a deployment
restarts the service with a new JWT_SECRETS / JWT_ACTIVE_KID.
"""

import time

import jwt
import pytest
from fastapi.testclient import TestClient

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_auth.app.main import create_app
from shared.config import AuthConfig

OLD = "old:secret-old-0123456789abcdef0123456789"
NEW = "new:secret-new-0123456789abcdef0123456789"
SINGLE = "single-secret-0123456789abcdef0123456789"


def build_client(jwt_secrets=None, jwt_active_kid=None, jwt_secret=None):
    config = AuthConfig(
        jwt_secrets=jwt_secrets,
        jwt_active_kid=jwt_active_kid,
        jwt_secret=jwt_secret,
        argon2_time_cost=1,
        argon2_memory_cost=8,
        argon2_parallelism=1,
    )
    return TestClient(create_app(config))


def issue(client, sub="alice", exp_seconds=600):
    response = client.post("/token", json={"sub": sub, "exp_seconds": exp_seconds})
    assert response.status_code == 200
    return response.json()["token"]


def verify(client, token):
    return client.post("/token/verify", json={"token": token})


class TestKeyRotationFlow:
    """Rotate from a single key to a new active key and retire the old one."""

    def test_complete_rotation(self):
        """Test tokens survive rotation while their key stays configured."""
        # 1. Only the old key exists
        before = build_client(OLD)
        old_token = issue(before)
        assert jwt.get_unverified_header(old_token)["kid"] == "old"

        # 2. New key added and activated, old key kept for verification
        during = build_client(f"{OLD},{NEW}", "new")
        new_token = issue(during)
        assert jwt.get_unverified_header(new_token)["kid"] == "new"
        assert verify(during, old_token).status_code == 200
        assert verify(during, new_token).json()["sub"] == "alice"

        # 3. Old key retired: its tokens stop verifying
        after = build_client(NEW)
        assert verify(after, old_token).status_code == 401
        assert verify(after, new_token).status_code == 200

    def test_migration_from_single_secret(self):
        """Test tokens from the single-secret setup verify after moving to kid pairs."""
        legacy = build_client(jwt_secret=SINGLE)
        legacy_token = issue(legacy)
        assert jwt.get_unverified_header(legacy_token)["kid"] == "default"

        rotated = build_client(f"default:{SINGLE},{NEW}", "new")
        assert verify(rotated, legacy_token).status_code == 200

    def test_token_without_kid_verifies_under_any_key(self):
        """Test tokens from issuers that omit the kid header."""
        client = build_client(f"{OLD},{NEW}", "new")
        secret = NEW.split(":", 1)[1]
        token = jwt.encode({"sub": "bob", "exp": int(time.time()) + 60}, secret, algorithm="HS256")

        response = verify(client, token)
        assert response.status_code == 200
        assert response.json()["sub"] == "bob"

    def test_invalid_multi_secret_falls_back_to_single_secret(self):
        """Test a multi-secret setting with no valid pairs uses JWT_SECRET."""
        client = build_client("broken,:nokid", "new", SINGLE)

        token = issue(client)
        assert jwt.get_unverified_header(token)["kid"] == "default"
        jwt.decode(token, SINGLE, algorithms=["HS256"])

    @pytest.mark.parametrize("exp_seconds", [1, 60, 3600])
    def test_round_trip_lifetimes(self, exp_seconds):
        """Test expiry is issuance time plus the requested lifetime."""
        client = build_client(f"{OLD},{NEW}", "new")
        issued_at = int(time.time())

        exp = verify(client, issue(client, exp_seconds=exp_seconds)).json()["exp"]

        assert issued_at + exp_seconds <= exp <= int(time.time()) + exp_seconds
