"""Signature verification tests.

Verifies:
- A signature produced with the shared secret verifies
- Any change to digest, body or secret fails verification
- Empty or missing inputs fail closed
- Malformed headers yield False instead of raising
"""

import hashlib
import hmac

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from hubhook.core.security import (
    SIGNATURE_PREFIX,
    SignedPayload,
    sign_payload,
    verify_signature,
)

BODY = b'{"a":1}'
SECRET = "mysecret"
DIGEST = hmac.new(SECRET.encode("utf-8"), BODY, hashlib.sha256).hexdigest()


def _flip_bit(hex_digest: str, bit: int) -> str:
    raw = bytearray(bytes.fromhex(hex_digest))
    raw[bit // 8] ^= 1 << (bit % 8)
    return raw.hex()


class TestKnownVector:
    """The {"a":1} / mysecret scenario."""

    def test_sign_payload_matches_reference_hmac(self):
        assert sign_payload(BODY, SECRET) == f"sha256={DIGEST}"

    def test_correct_signature_verifies(self):
        assert verify_signature(BODY, f"sha256={DIGEST}", SECRET) is True

    def test_wrong_secret_fails(self):
        assert verify_signature(BODY, f"sha256={DIGEST}", "wrongsecret") is False

    def test_modified_body_fails(self):
        assert verify_signature(b'{"a":2}', f"sha256={DIGEST}", SECRET) is False

    def test_reserialized_body_fails(self):
        """Whitespace changes from re-serializing JSON break the signature."""
        assert verify_signature(b'{"a": 1}', f"sha256={DIGEST}", SECRET) is False

    def test_uppercase_hex_verifies(self):
        assert verify_signature(BODY, f"sha256={DIGEST.upper()}", SECRET) is True

    def test_bare_digest_without_prefix_verifies(self):
        assert verify_signature(BODY, DIGEST, SECRET) is True


class TestFailClosed:
    """Empty inputs never verify."""

    @pytest.mark.parametrize("signature", ["", None])
    def test_empty_signature(self, signature):
        assert verify_signature(BODY, signature, SECRET) is False

    @pytest.mark.parametrize("secret", ["", None])
    def test_empty_secret(self, secret):
        assert verify_signature(BODY, f"sha256={DIGEST}", secret) is False

    def test_signature_made_with_empty_secret_still_fails(self):
        signature = sign_payload(BODY, "")
        assert verify_signature(BODY, signature, "") is False

    def test_prefix_only(self):
        assert verify_signature(BODY, SIGNATURE_PREFIX, SECRET) is False


class TestMalformedSignature:
    """Malformed headers degrade to False."""

    @pytest.mark.parametrize(
        "signature",
        [
            "sha256=zz",
            "sha256=abc",
            "sha256=" + "g" * 64,
            "sha256=" + DIGEST[:-1],
            "sha256=" + DIGEST + "00",
            "sha256=" + DIGEST[:-2] + "é1",
            "sha256=" + " " * 64,
            "sha1=" + DIGEST[:40],
            "md5=" + DIGEST,
            "sha256:" + DIGEST,
        ],
    )
    def test_returns_false(self, signature):
        assert verify_signature(BODY, signature, SECRET) is False

    def test_secret_that_cannot_be_encoded(self):
        assert verify_signature(BODY, f"sha256={DIGEST}", "bad\udcffsecret") is False


class TestSignedPayload:
    """SignedPayload delegates to verify_signature."""

    def test_valid(self):
        assert SignedPayload(BODY, f"sha256={DIGEST}", SECRET).verify() is True

    def test_invalid(self):
        assert SignedPayload(BODY, "sha256=zz", SECRET).verify() is False

    def test_is_immutable(self):
        delivery = SignedPayload(BODY, f"sha256={DIGEST}", SECRET)
        with pytest.raises(AttributeError):
            delivery.secret = "other"

    def test_verify_is_documented(self):
        assert SignedPayload.verify.__doc__


class TestProperties:
    """Properties over arbitrary bodies and secrets."""

    @given(body=st.binary(max_size=4096), secret=st.text(min_size=1))
    @settings(max_examples=100)
    def test_own_signature_always_verifies(self, body, secret):
        assert verify_signature(body, sign_payload(body, secret), secret) is True

    @given(
        body=st.binary(max_size=1024),
        secret=st.text(min_size=1),
        bit=st.integers(min_value=0, max_value=255),
    )
    @settings(max_examples=100)
    def test_single_bit_flip_fails(self, body, secret, bit):
        digest = sign_payload(body, secret)[len(SIGNATURE_PREFIX):]
        tampered = SIGNATURE_PREFIX + _flip_bit(digest, bit)
        assert verify_signature(body, tampered, secret) is False

    @given(body=st.binary(max_size=1024), secret=st.text())
    @settings(max_examples=50)
    def test_empty_signature_never_verifies(self, body, secret):
        assert verify_signature(body, "", secret) is False

    @given(body=st.binary(max_size=1024), signature=st.text())
    @settings(max_examples=50)
    def test_empty_secret_never_verifies(self, body, signature):
        assert verify_signature(body, signature, "") is False

    @given(body=st.binary(max_size=256), signature=st.text(), secret=st.text())
    @settings(max_examples=200)
    def test_never_raises(self, body, signature, secret):
        assert verify_signature(body, signature, secret) in (True, False)
