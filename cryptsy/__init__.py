# ============================================================================
# Cryptsy Private API Client v1.0.0
# ============================================================================
#
# Purpose: Signed access to the Cryptsy private API
#
# Components:
#   - NonceGenerator: Strictly increasing nonce per credential
#   - CryptsySigner: HMAC-SHA512 request signing
#   - HTTPTransport: Pooled HTTPS POST with bounded timeout
#   - decode_envelope / unwrap: {success, error, return} wrapper
#   - mappers: Typed decoding per endpoint
#   - CryptsyClient: Endpoint methods
#
# ============================================================================

from cryptsy.errors import (
    CryptsyError,
    MissingCredentialsError,
    ConfigurationError,
    TransportError,
    ProtocolError,
    DecodeError,
    InvalidOrderTypeError,
    UnknownMarketError,
    ErrorCode,
)
from cryptsy.models import (
    ActionType,
    Balance,
    Market,
    MarketKey,
    Order,
    OrderAction,
    OrderBook,
    Trade,
)
from cryptsy.decimal_gateway import DecimalGateway
from cryptsy.nonce import NonceGenerator
from cryptsy.hmac_signer import CryptsySigner, SignedRequest, encode_params
from cryptsy.transport import HTTPTransport, HTTPResponse
from cryptsy.envelope import Envelope, decode_envelope, unwrap
from cryptsy.config import CryptsyConfig
from cryptsy.client import CryptsyClient

__all__ = [
    # Errors
    'CryptsyError',
    'MissingCredentialsError',
    'TransportError',
    'ProtocolError',
    'DecodeError',
    'InvalidOrderTypeError',
    'UnknownMarketError',
    'ConfigurationError',
    'ErrorCode',
    # Models
    'ActionType',
    'Balance',
    'Market',
    'MarketKey',
    'Order',
    'OrderAction',
    'OrderBook',
    'Trade',
    # Pipeline
    'DecimalGateway',
    'NonceGenerator',
    'CryptsySigner',
    'SignedRequest',
    'encode_params',
    'HTTPTransport',
    'HTTPResponse',
    'Envelope',
    'decode_envelope',
    'unwrap',
    # Client
    'CryptsyConfig',
    'CryptsyClient',
]

# Version tracking
__version__ = '1.0.0'
