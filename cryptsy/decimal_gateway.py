# ============================================================================
# Cryptsy Private API Client v1.0.0
# Decimal Gateway - Strict numeric parsing
# ============================================================================
#
# Purpose: Every numeric value read from or written to the venue passes
#          through this gateway
#
# Rules:
#   - Venue quantities arrive as decimal strings ("1.50000000")
#   - A value that does not parse fails the whole call (CRYPTSY-DEC-001);
#     nothing is ever coerced to zero
#   - Outbound prices and quantities use 8 fractional digits
#
# ============================================================================

from decimal import Decimal, ROUND_HALF_EVEN, InvalidOperation
from typing import Optional, Union, Any
import logging

from cryptsy.errors import DecodeError, ErrorCode

logger = logging.getLogger(__name__)


Numeric = Union[str, int, float, Decimal]


class DecimalGateway:
    """
    Strict conversion between venue strings and Python numbers.

    Example Usage:
        gateway = DecimalGateway()

        qty = gateway.to_decimal("1.50000000", field_name="BTC")  # Decimal('1.50000000')
        order_id = gateway.to_int("42", field_name="orderid")     # 42
        gateway.format_fixed(Decimal("0.1"))                      # '0.10000000'
    """

    # 8 decimal places (satoshi)
    CRYPTO_PRECISION = Decimal('0.00000001')

    def to_decimal(
        self,
        value: Any,
        field_name: str = "value",
        correlation_id: Optional[str] = None
    ) -> Decimal:
        """
        Parse a venue value into a finite Decimal.

        Args:
            value: String (preferred), int or float from decoded JSON
            field_name: Name used in the error message
            correlation_id: Audit trail identifier

        Returns:
            Decimal exactly as the venue wrote it

        Raises:
            DecodeError: If value is missing, boolean, non-numeric or not finite
        """
        if value is None or isinstance(value, bool):
            self._fail(value, field_name, "decimal", correlation_id)

        if isinstance(value, str):
            text = value.strip()
        elif isinstance(value, (int, float, Decimal)):
            # Via str() so floats keep their shortest repr instead of binary noise
            text = str(value)
        else:
            self._fail(value, field_name, "decimal", correlation_id)

        # Decimal() and int() both accept "1_000" and non-ASCII digits; the venue sends neither
        if "_" in text or not text.isascii():
            self._fail(value, field_name, "decimal", correlation_id)

        try:
            result = Decimal(text)
        except (InvalidOperation, ValueError) as e:
            self._fail(value, field_name, "decimal", correlation_id, e)

        if not result.is_finite():
            self._fail(value, field_name, "decimal", correlation_id)

        return result

    def to_int(
        self,
        value: Any,
        field_name: str = "value",
        correlation_id: Optional[str] = None
    ) -> int:
        """
        Parse a string-encoded (or JSON integer) identifier.

        Raises:
            DecodeError: If value is not an integer literal
        """
        if isinstance(value, bool):
            self._fail(value, field_name, "integer", correlation_id)
        if isinstance(value, int):
            return value
        if isinstance(value, str) and "_" not in value and value.isascii():
            try:
                return int(value.strip(), 10)
            except ValueError as e:
                self._fail(value, field_name, "integer", correlation_id, e)
        self._fail(value, field_name, "integer", correlation_id)

    def format_fixed(self, value: Numeric, places: Decimal = CRYPTO_PRECISION) -> str:
        """
        Format an outbound price/quantity as a fixed-point string.

        Uses 8 fractional digits by default, e.g. ``1.5`` -> ``"1.50000000"``.

        Raises:
            ValueError: If value is not a finite number, or has too many digits
                to carry 8 fractional places
        """
        if isinstance(value, bool):
            raise ValueError(f"Cannot format boolean {value!r} as a decimal")
        text = str(value)
        if not text.isascii():
            raise ValueError(f"Cannot format {value!r} as a decimal")
        try:
            decimal_value = Decimal(text)
        except InvalidOperation as e:
            raise ValueError(f"Cannot format {value!r} as a decimal") from e
        if not decimal_value.is_finite():
            raise ValueError(f"Cannot format non-finite value {value!r}")

        # quantize signals InvalidOperation past the context precision (28 digits)
        try:
            fixed = decimal_value.quantize(places, rounding=ROUND_HALF_EVEN)
        except InvalidOperation as e:
            raise ValueError(f"Cannot format {value!r} with {abs(places.as_tuple().exponent)} decimal places") from e

        return f"{fixed:f}"

    @staticmethod
    def _fail(
        value: Any,
        field_name: str,
        kind: str,
        correlation_id: Optional[str],
        cause: Optional[Exception] = None
    ) -> None:
        logger.error(
            f"[{ErrorCode.DECODE}] {kind.capitalize()} conversion failed | "
            f"field={field_name} | value={value!r} | "
            f"type={type(value).__name__} | correlation_id={correlation_id}"
        )
        error = DecodeError(
            f"Cannot parse {field_name}={value!r} as {kind}",
            payload=repr(value)[:200]
        )
        if cause is not None:
            raise error from cause
        raise error


# ============================================================================
# Module-level convenience functions
# ============================================================================

_gateway = DecimalGateway()


def to_decimal(value: Any, field_name: str = "value", correlation_id: Optional[str] = None) -> Decimal:
    """Module-level convenience function for strict Decimal parsing."""
    return _gateway.to_decimal(value, field_name, correlation_id)


def to_int(value: Any, field_name: str = "value", correlation_id: Optional[str] = None) -> int:
    """Module-level convenience function for strict integer parsing."""
    return _gateway.to_int(value, field_name, correlation_id)


def format_fixed(value: Numeric) -> str:
    """Module-level convenience function for 8-digit fixed-point formatting."""
    return _gateway.format_fixed(value)
