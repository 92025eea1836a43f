"""
Unit Tests for the HMAC-SHA512 request signer

Tests:
- Canonical form encoding (sorted keys, percent-encoding)
- Signature matches an independently computed HMAC-SHA512
- Nonce attachment without mutating the caller's parameters
- Missing credentials fail with CRYPTSY-SEC-001
- Credentials never appear in repr or logs
"""

import hashlib
import hmac
import logging
import os
import sys
from urllib.parse import parse_qsl

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from cryptsy.errors import MissingCredentialsError, ErrorCode
from cryptsy.hmac_signer import CryptsySigner, SignedRequest, encode_params
from cryptsy.nonce import NonceGenerator


PUBLIC_KEY = "pub-0123456789abcdef"
PRIVATE_KEY = "priv-secret-fedcba9876543210"


@pytest.fixture
def signer() -> CryptsySigner:
    return CryptsySigner(PUBLIC_KEY, PRIVATE_KEY, nonce_generator=NonceGenerator())


class TestEncodeParams:

    def test_keys_are_sorted(self) -> None:
        body = encode_params({'nonce': '5', 'method': 'depth', 'marketid': '3'})
        assert body == "marketid=3&method=depth&nonce=5"

    def test_values_are_percent_encoded(self) -> None:
        body = encode_params({'method': 'a b&c=d/é'})
        assert body == "method=a+b%26c%3Dd%2F%C3%A9"

    def test_insertion_order_does_not_matter(self) -> None:
        first = encode_params({'a': '1', 'b': '2', 'c': '3'})
        second = encode_params({'c': '3', 'a': '1', 'b': '2'})
        assert first == second


class TestSign:

    def test_signature_is_hmac_sha512_of_body(self, signer: CryptsySigner) -> None:
        signed = signer.sign({'method': 'getinfo'}, nonce=1234567890)

        assert signed.body == "method=getinfo&nonce=1234567890"
        expected = hmac.new(
            PRIVATE_KEY.encode('utf-8'),
            signed.body.encode('utf-8'),
            hashlib.sha512
        ).hexdigest()
        assert signed.signature == expected

    def test_signature_is_lowercase_hex_of_64_bytes(self, signer: CryptsySigner) -> None:
        signed = signer.sign({'method': 'getinfo'})
        assert len(signed.signature) == 128
        assert signed.signature == signed.signature.lower()
        int(signed.signature, 16)

    def test_nonce_is_added_and_body_matches_params(self, signer: CryptsySigner) -> None:
        signed = signer.sign({'method': 'depth', 'marketid': '132'})

        assert isinstance(signed, SignedRequest)
        assert signed.params['nonce'] == str(signed.nonce)
        assert dict(parse_qsl(signed.body)) == signed.params

    def test_caller_params_are_not_mutated(self, signer: CryptsySigner) -> None:
        params = {'method': 'getinfo'}
        signer.sign(params)
        assert params == {'method': 'getinfo'}

    def test_successive_signatures_use_increasing_nonces(self, signer: CryptsySigner) -> None:
        first = signer.sign({'method': 'getinfo'})
        second = signer.sign({'method': 'getinfo'})
        assert second.nonce > first.nonce
        assert second.signature != first.signature

    def test_auth_headers(self, signer: CryptsySigner) -> None:
        signed = signer.sign({'method': 'getinfo'})
        assert signer.auth_headers(signed) == {'Key': PUBLIC_KEY, 'Sign': signed.signature}

    def test_default_generator_is_shared_per_public_key(self) -> None:
        NonceGenerator.reset_registry()
        first = CryptsySigner("shared-key", "a")
        second = CryptsySigner("shared-key", "b")
        other = CryptsySigner("other-key", "c")

        assert first.nonces is second.nonces
        assert first.nonces is not other.nonces
        NonceGenerator.reset_registry()


class TestCredentials:

    @pytest.mark.parametrize("public_key, private_key", [
        ("", PRIVATE_KEY),
        (PUBLIC_KEY, ""),
        ("", ""),
    ])
    def test_missing_credentials_raise(self, public_key: str, private_key: str) -> None:
        with pytest.raises(MissingCredentialsError) as exc_info:
            CryptsySigner(public_key, private_key)
        assert ErrorCode.MISSING_CREDENTIALS in str(exc_info.value)

    def test_redacted_key(self, signer: CryptsySigner) -> None:
        assert signer.get_redacted_key() == "pub-...cdef"
        assert CryptsySigner("short", "x").get_redacted_key() == "[REDACTED]"

    def test_private_key_not_in_repr(self, signer: CryptsySigner) -> None:
        assert PRIVATE_KEY not in repr(signer)
        assert PUBLIC_KEY not in repr(signer)

    def test_private_key_and_signature_not_logged(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="cryptsy")
        signer = CryptsySigner(PUBLIC_KEY, PRIVATE_KEY, nonce_generator=NonceGenerator())
        signed = signer.sign({'method': 'getinfo'})

        assert PRIVATE_KEY not in caplog.text
        assert PUBLIC_KEY not in caplog.text
        assert signed.signature not in caplog.text
