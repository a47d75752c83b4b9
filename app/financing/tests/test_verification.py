"""
Tests for callback hash verification.
"""

import hashlib

import pytest

from financing.verification import generate_verification_hash, verify_callback


SECRET = "partner-secret"


class TestGenerateVerificationHash:
    """Tests for generate_verification_hash."""

    def test_matches_semicolon_joined_sha512(self):
        expected = hashlib.sha512(b"partner-secret;SUCCESS;R1;Order-1042").hexdigest()

        assert generate_verification_hash(SECRET, "SUCCESS", "R1", "Order-1042") == expected

    def test_is_lowercase_hex(self):
        digest = generate_verification_hash(SECRET, "SUCCESS", "R1", "Order-1042")

        assert len(digest) == 128
        assert digest == digest.lower()

    def test_missing_fields_are_empty_strings(self):
        expected = hashlib.sha512(b"partner-secret;TIMEOUT;;Order-1042").hexdigest()

        assert generate_verification_hash(SECRET, "TIMEOUT", None, "Order-1042") == expected

    def test_rejects_non_string_fields(self):
        with pytest.raises(TypeError):
            generate_verification_hash(SECRET, "SUCCESS", 123, "Order-1042")


class TestVerifyCallback:
    """Tests for verify_callback."""

    def test_valid_hash(self):
        claimed = generate_verification_hash(SECRET, "SUCCESS", "R1", "Order-1042")

        assert verify_callback(SECRET, "SUCCESS", "R1", "Order-1042", claimed) is True

    @pytest.mark.parametrize(
        "status,reference_id,usage",
        [
            ("SUCCESs", "R1", "Order-1042"),
            ("SUCCESS", "R2", "Order-1042"),
            ("SUCCESS", "R1", "Order-1043"),
            ("SUCCESS", "R1", "Order-1042 "),
        ],
    )
    def test_single_character_change_fails(self, status, reference_id, usage):
        claimed = generate_verification_hash(SECRET, "SUCCESS", "R1", "Order-1042")

        assert verify_callback(SECRET, status, reference_id, usage, claimed) is False

    def test_wrong_secret_fails(self):
        claimed = generate_verification_hash("other-secret", "SUCCESS", "R1", "Order-1042")

        assert verify_callback(SECRET, "SUCCESS", "R1", "Order-1042", claimed) is False

    def test_tampered_hash_fails(self):
        claimed = generate_verification_hash(SECRET, "SUCCESS", "R1", "Order-1042")
        tampered = ("0" if claimed[0] != "0" else "1") + claimed[1:]

        assert verify_callback(SECRET, "SUCCESS", "R1", "Order-1042", tampered) is False

    def test_uppercase_hash_fails(self):
        """Comparison is exact; the provider sends lowercase hex."""
        claimed = generate_verification_hash(SECRET, "SUCCESS", "R1", "Order-1042").upper()

        assert verify_callback(SECRET, "SUCCESS", "R1", "Order-1042", claimed) is False

    def test_missing_fields_verify_as_empty(self):
        claimed = generate_verification_hash(SECRET, "CANCELLED", "", "Order-1042")

        assert verify_callback(SECRET, "CANCELLED", None, "Order-1042", claimed) is True

    @pytest.mark.parametrize("claimed", [None, "", 12345, ["abc"], {"hash": "abc"}])
    def test_invalid_claimed_hash(self, claimed):
        assert verify_callback(SECRET, "SUCCESS", "R1", "Order-1042", claimed) is False

    @pytest.mark.parametrize("reference_id", [1, 1.5, ["R1"], {"id": "R1"}, True])
    def test_non_string_fields_never_raise(self, reference_id):
        claimed = generate_verification_hash(SECRET, "SUCCESS", "R1", "Order-1042")

        assert verify_callback(SECRET, "SUCCESS", reference_id, "Order-1042", claimed) is False

    def test_non_ascii_claimed_hash(self):
        assert verify_callback(SECRET, "SUCCESS", "R1", "Order-1042", "ü" * 128) is False
