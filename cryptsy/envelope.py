# ============================================================================
# Cryptsy Private API Client v1.0.0
# Envelope Decoder
# ============================================================================
#
# Purpose: Parse the generic {success, error, return} wrapper
#
# Rules:
#   - success == "1": payload handed to the endpoint mapper
#   - success == "0": ProtocolError carrying the venue error verbatim
#   - Anything unparseable: DecodeError, never a default result
#   - Field names are matched case-insensitively ("Success" / "success")
#
# ============================================================================

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from cryptsy.errors import DecodeError, ProtocolError, ErrorCode

logger = logging.getLogger(__name__)


SUCCESS = "1"
FAILURE = "0"


@dataclass(frozen=True)
class Envelope:
    """Decoded response wrapper. ``fields`` holds every top-level key, lower-cased."""
    success: bool
    error: str
    payload: Any
    fields: Dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        """Top-level field by case-insensitive name."""
        return self.fields.get(name.lower(), default)


def _excerpt(raw: Union[bytes, str]) -> str:
    if isinstance(raw, bytes):
        raw = raw.decode('utf-8', errors='replace')
    return raw[:200]


def _success_flag(value: Any) -> bool:
    # The venue sends "1"/"0" strings; tolerate JSON 1/0 as well
    if isinstance(value, bool):
        raise DecodeError(f"Invalid success flag {value!r}")
    if isinstance(value, int) and value in (0, 1):
        return value == 1
    if isinstance(value, str) and value.strip() in (SUCCESS, FAILURE):
        return value.strip() == SUCCESS
    raise DecodeError(f"Invalid success flag {value!r}")


def decode_envelope(raw: Union[bytes, str], correlation_id: Optional[str] = None) -> Envelope:
    """
    Parse a raw response body into an Envelope.

    Args:
        raw: Response body
        correlation_id: Audit trail identifier

    Returns:
        Envelope (success or failure)

    Raises:
        DecodeError: If the body is not a JSON object with a valid success flag
    """
    try:
        document = json.loads(raw)
    except (ValueError, TypeError) as e:
        logger.error(
            f"[{ErrorCode.DECODE}] Response is not JSON | "
            f"body={_excerpt(raw)!r} | correlation_id={correlation_id}"
        )
        raise DecodeError(f"Response is not valid JSON: {e}", payload=_excerpt(raw)) from e

    if not isinstance(document, dict):
        logger.error(
            f"[{ErrorCode.DECODE}] Response is not a JSON object | "
            f"type={type(document).__name__} | correlation_id={correlation_id}"
        )
        raise DecodeError(
            f"Response envelope must be a JSON object, got {type(document).__name__}",
            payload=_excerpt(raw)
        )

    fields = {str(k).lower(): v for k, v in document.items()}

    if 'success' not in fields:
        logger.error(
            f"[{ErrorCode.DECODE}] Envelope missing success flag | "
            f"keys={sorted(fields)} | correlation_id={correlation_id}"
        )
        raise DecodeError("Response envelope has no success field", payload=_excerpt(raw))

    try:
        success = _success_flag(fields['success'])
    except DecodeError as e:
        logger.error(
            f"[{ErrorCode.DECODE}] {e.message} | correlation_id={correlation_id}"
        )
        raise DecodeError(e.message, payload=_excerpt(raw)) from e

    error = fields.get('error')
    if error is None:
        error = ""
    elif not isinstance(error, str):
        error = str(error)

    return Envelope(
        success=success,
        error=error,
        payload=fields.get('return'),
        fields=fields
    )


def unwrap(
    raw: Union[bytes, str],
    method: Optional[str] = None,
    correlation_id: Optional[str] = None
) -> Envelope:
    """
    Decode and require success.

    Raises:
        DecodeError: If the body cannot be decoded
        ProtocolError: If the venue reported failure
    """
    envelope = decode_envelope(raw, correlation_id)
    if not envelope.success:
        logger.warning(
            f"[{ErrorCode.PROTOCOL}] Venue rejected request | "
            f"method={method} | error={envelope.error!r} | "
            f"correlation_id={correlation_id}"
        )
        raise ProtocolError(envelope.error, method=method)
    return envelope
