# ============================================================================
# Cryptsy Private API Client v1.0.0
# Error Taxonomy
# ============================================================================
#
# Purpose: Distinguish "could not reach the venue" from "venue rejected the
#          request" from "venue answered something we cannot read"
#
# Error Codes:
#   - CRYPTSY-SEC-001: Missing API credentials
#   - CRYPTSY-CFG-001: Required configuration missing or invalid
#   - CRYPTSY-TRN-001: Transport failure (DNS, TLS, timeout, unreadable body)
#   - CRYPTSY-API-001: Venue returned success == "0"
#   - CRYPTSY-DEC-001: Malformed envelope or payload
#   - CRYPTSY-ORD-001: Order type outside {buy, sell}
#   - CRYPTSY-ORD-002: Order action references an unknown market
#
# ============================================================================

from typing import Optional


class ErrorCode:
    """Error codes used in log lines and exception messages."""
    MISSING_CREDENTIALS = "CRYPTSY-SEC-001"
    CONFIGURATION = "CRYPTSY-CFG-001"
    TRANSPORT = "CRYPTSY-TRN-001"
    PROTOCOL = "CRYPTSY-API-001"
    DECODE = "CRYPTSY-DEC-001"
    INVALID_ORDER_TYPE = "CRYPTSY-ORD-001"
    UNKNOWN_MARKET = "CRYPTSY-ORD-002"


class CryptsyError(Exception):
    """Base exception for all Cryptsy client errors."""

    error_code = "CRYPTSY-000"

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"{self.error_code}: {message}")


class MissingCredentialsError(CryptsyError):
    """Raised when the public or private key is empty."""
    error_code = ErrorCode.MISSING_CREDENTIALS


class ConfigurationError(CryptsyError):
    """Raised when configuration is missing or invalid. Fail closed."""
    error_code = ErrorCode.CONFIGURATION


class TransportError(CryptsyError):
    """
    The request could not be delivered or its response could not be read.

    Always retryable in principle; never a business outcome.
    """
    error_code = ErrorCode.TRANSPORT

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ProtocolError(CryptsyError):
    """
    The venue answered with success == "0".

    ``message`` holds the venue's error string verbatim. The venue exposes
    no structured error codes, so callers have to inspect the text.
    """
    error_code = ErrorCode.PROTOCOL

    def __init__(self, message: str, method: Optional[str] = None):
        self.method = method
        super().__init__(message)


class DecodeError(CryptsyError):
    """The envelope or payload did not have the expected shape."""
    error_code = ErrorCode.DECODE

    def __init__(self, message: str, payload: Optional[str] = None):
        self.payload = payload
        super().__init__(message)


class InvalidOrderTypeError(CryptsyError, ValueError):
    """Order type is not one of buy/sell. Raised before any request is sent."""
    error_code = ErrorCode.INVALID_ORDER_TYPE


class UnknownMarketError(CryptsyError, KeyError):
    """Order action points at a MarketKey absent from the supplied markets."""
    error_code = ErrorCode.UNKNOWN_MARKET

    def __str__(self) -> str:
        return Exception.__str__(self)
