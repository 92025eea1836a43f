# ============================================================================
# Cryptsy Private API Client v1.0.0
# HMAC Signer - Request authentication
# ============================================================================
#
# Purpose: Signs every private API request using HMAC-SHA512
#
# Rules:
#   - The private key is only ever used as the MAC key
#   - Credentials NEVER appear in logs
#   - CRYPTSY-SEC-001 raised if credentials missing
#
# Cryptsy Signature Format:
#   body      = urlencode(sorted(params + nonce))
#   signature = hex(HMAC-SHA512(private_key, body))
#
# ============================================================================

import hmac
import hashlib
import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional
from urllib.parse import urlencode

from cryptsy.errors import MissingCredentialsError, ErrorCode
from cryptsy.nonce import NonceGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignedRequest:
    """Nonce-augmented parameters, their form encoding and its signature."""
    params: Dict[str, str]
    body: str
    signature: str

    @property
    def nonce(self) -> int:
        return int(self.params['nonce'])


def encode_params(params: Mapping[str, str]) -> str:
    """
    Canonical form encoding: keys sorted, values percent-encoded (spaces as '+').

    Args:
        params: Request parameters

    Returns:
        application/x-www-form-urlencoded string
    """
    return urlencode(sorted((str(k), str(v)) for k, v in params.items()))


class CryptsySigner:
    """
    HMAC-SHA512 Request Signer.

    Example Usage:
        signer = CryptsySigner(public_key, private_key)
        signed = signer.sign({'method': 'getinfo'})
        headers = signer.auth_headers(signed)
    """

    def __init__(
        self,
        public_key: str,
        private_key: str,
        nonce_generator: Optional[NonceGenerator] = None,
        correlation_id: Optional[str] = None
    ):
        """
        Args:
            public_key: Public key sent in the `Key` header
            private_key: Secret used as the HMAC key
            nonce_generator: Nonce source (default: shared per public key)
            correlation_id: Audit trail identifier

        Raises:
            MissingCredentialsError: If either key is empty
        """
        self.correlation_id = correlation_id

        missing = []
        if not public_key:
            missing.append('public_key')
        if not private_key:
            missing.append('private_key')

        if missing:
            logger.error(
                f"[{ErrorCode.MISSING_CREDENTIALS}] Missing credentials | "
                f"missing={missing} | correlation_id={correlation_id}"
            )
            raise MissingCredentialsError(
                f"Missing Cryptsy API credentials: {', '.join(missing)}"
            )

        self._public_key = public_key
        self._private_key = private_key.encode('utf-8')
        self.nonces = nonce_generator or NonceGenerator.for_key(public_key)

        logger.debug(
            f"[CRYPTSY-SIG] Signer initialized | "
            f"public_key={self.get_redacted_key()} | correlation_id={correlation_id}"
        )

    @property
    def public_key(self) -> str:
        return self._public_key

    def compute_signature(self, body: str) -> str:
        """Lowercase hex HMAC-SHA512 of ``body`` under the private key."""
        return hmac.new(
            self._private_key,
            body.encode('utf-8'),
            hashlib.sha512
        ).hexdigest()

    def sign(self, params: Mapping[str, str], nonce: Optional[int] = None) -> SignedRequest:
        """
        Attach a nonce and sign the parameters.

        The caller's mapping is not modified.

        Args:
            params: Request parameters, must include `method`
            nonce: Explicit nonce (default: next value from the generator)

        Returns:
            SignedRequest with the augmented params, body and signature
        """
        signed_params = {str(k): str(v) for k, v in params.items()}
        if nonce is None:
            nonce = self.nonces.next()
        signed_params['nonce'] = str(nonce)

        body = encode_params(signed_params)
        signature = self.compute_signature(body)

        logger.debug(
            f"[CRYPTSY-SIG] Request signed | "
            f"method={signed_params.get('method')} | nonce={nonce} | "
            f"signature=[REDACTED] | correlation_id={self.correlation_id}"
        )

        return SignedRequest(params=signed_params, body=body, signature=signature)

    def auth_headers(self, signed: SignedRequest) -> Dict[str, str]:
        """Authentication headers for a signed request."""
        return {
            'Key': self._public_key,
            'Sign': signed.signature,
        }

    def get_redacted_key(self) -> str:
        """
        Public key redacted for logging: first 4 and last 4 characters only.
        """
        if len(self._public_key) > 8:
            return f"{self._public_key[:4]}...{self._public_key[-4:]}"
        return "[REDACTED]"

    def __repr__(self) -> str:
        return f"CryptsySigner(public_key={self.get_redacted_key()!r})"
