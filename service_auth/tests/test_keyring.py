"""
Unit tests for KeyRing.
"""

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_auth.app.keys import DEFAULT_KID, DEV_SECRET, KeyRing, Secret, load_keyring, parse_secrets
from shared.config import AuthConfig


class TestParseSecrets:
    """Test cases for parsing the multi-secret setting."""

    def test_parses_pairs_in_order(self):
        """Test pairs keep configuration order."""
        secrets = parse_secrets("k1:aaaa,k2:bbbb")

        assert [s.kid for s in secrets] == ["k1", "k2"]
        assert [s.value for s in secrets] == [b"aaaa", b"bbbb"]

    def test_splits_on_first_colon_only(self):
        """Test secrets may themselves contain colons."""
        secrets = parse_secrets("k1:a:b:c")

        assert secrets == [Secret(kid="k1", value=b"a:b:c")]

    def test_trims_whitespace(self):
        """Test kid and secret are trimmed."""
        secrets = parse_secrets("  k1 :  aaaa , k2:bbbb  ")

        assert secrets == [Secret(kid="k1", value=b"aaaa"), Secret(kid="k2", value=b"bbbb")]

    @pytest.mark.parametrize("raw", ["", ",", "nocolon", ":secret", "kid:", "  :  ", "kid:   "])
    def test_discards_invalid_parts(self, raw):
        """Test parts with no colon or an empty side are dropped."""
        assert parse_secrets(raw) == []

    def test_keeps_valid_parts_among_invalid(self):
        """Test one bad part does not discard the others."""
        secrets = parse_secrets("bad,k1:aaaa,:x,k2:")

        assert secrets == [Secret(kid="k1", value=b"aaaa")]


class TestLoadKeyRing:
    """Test cases for building a key ring from settings."""

    def test_multi_secret_with_active_override(self):
        """Test explicit active kid is used."""
        ring = load_keyring("k1:aaaa,k2:bbbb", None, "k2")

        assert ring.kids == ["k1", "k2"]
        assert ring.active_kid == "k2"

    def test_multi_secret_defaults_active_to_first(self):
        """Test active kid defaults to the first configured pair."""
        ring = load_keyring("k1:aaaa,k2:bbbb", None, None)

        assert ring.active_kid == "k1"

    def test_empty_active_override_is_ignored(self):
        """Test an empty active kid counts as unset."""
        ring = load_keyring("k1:aaaa,k2:bbbb", None, "")

        assert ring.active_kid == "k1"

    def test_multi_secret_wins_over_single_secret(self):
        """Test the scalar secret is ignored when pairs are configured."""
        ring = load_keyring("k1:aaaa", "scalar", None)

        assert ring.secrets == (Secret(kid="k1", value=b"aaaa"),)

    def test_falls_back_to_single_secret_when_multi_is_empty(self):
        """Test an all-invalid multi-secret setting falls back to the scalar secret."""
        ring = load_keyring("garbage,:x", "scalar", "k2")

        assert ring.secrets == (Secret(kid=DEFAULT_KID, value=b"scalar"),)
        assert ring.active_kid == DEFAULT_KID

    def test_single_secret_when_multi_absent(self):
        """Test the scalar secret is used under the default kid."""
        ring = load_keyring(None, "scalar", "ignored")

        assert ring.secrets == (Secret(kid=DEFAULT_KID, value=b"scalar"),)
        assert ring.active_kid == DEFAULT_KID

    def test_development_placeholder_when_nothing_configured(self):
        """Test the ring is never empty."""
        ring = load_keyring(None, None, None)

        assert ring.secrets == (Secret(kid=DEFAULT_KID, value=DEV_SECRET.encode()),)
        assert ring.resolve_active() == DEV_SECRET.encode()

    def test_unknown_active_kid_does_not_fail(self):
        """Test an active kid missing from the ring still loads."""
        ring = load_keyring("k1:aaaa,k2:bbbb", None, "k9")

        assert ring.active_kid == "k9"
        assert ring.resolve_active() == b"aaaa"

    def test_from_config(self):
        """Test building from the service config."""
        config = AuthConfig(jwt_secrets="k1:aaaa,k2:bbbb", jwt_active_kid="k2")

        ring = KeyRing.from_config(config)

        assert ring.active_kid == "k2"
        assert ring.resolve_active() == b"bbbb"


class TestKeyRing:
    """Test cases for key resolution."""

    @pytest.fixture
    def ring(self):
        """Create a two-key ring with the second key active."""
        return KeyRing(
            secrets=(Secret("A", b"secret-a"), Secret("B", b"secret-b")),
            active_kid="B",
        )

    def test_resolve_active(self, ring):
        """Test the active kid's secret signs."""
        assert ring.resolve_active() == b"secret-b"

    def test_resolve_active_falls_back_to_first(self):
        """Test an unmatched active kid resolves to the first secret."""
        ring = KeyRing(secrets=(Secret("A", b"secret-a"), Secret("B", b"secret-b")), active_kid="Z")

        assert ring.resolve_active() == b"secret-a"

    def test_resolve_active_on_empty_ring(self):
        """Test an empty ring degrades to an empty key instead of raising."""
        ring = KeyRing(secrets=())

        assert ring.active_kid == DEFAULT_KID
        assert ring.resolve_active() == b""
        assert ring.candidates_for(None) == []

    def test_candidates_for_known_kid(self, ring):
        """Test a known kid narrows candidates to exactly its secret."""
        assert ring.candidates_for("A") == [b"secret-a"]
        assert ring.candidates_for("B") == [b"secret-b"]

    def test_candidates_for_unknown_kid(self, ring):
        """Test an unknown kid widens to every secret in order."""
        assert ring.candidates_for("C") == [b"secret-a", b"secret-b"]

    def test_candidates_for_absent_kid(self, ring):
        """Test a missing kid widens to every secret in order."""
        assert ring.candidates_for(None) == [b"secret-a", b"secret-b"]

    def test_duplicate_kids_first_match_wins(self):
        """Test duplicated kids resolve to their first occurrence."""
        ring = KeyRing(
            secrets=(Secret("A", b"first"), Secret("A", b"second")),
            active_kid="A",
        )

        assert ring.resolve_active() == b"first"
        assert ring.candidates_for("A") == [b"first"]

    def test_ring_is_immutable(self, ring):
        """Test the ring cannot be modified after construction."""
        with pytest.raises(AttributeError):
            ring.active_kid = "A"

    def test_repr_hides_secret_material(self, ring):
        """Test secrets never appear in reprs."""
        assert "secret-a" not in repr(ring)
