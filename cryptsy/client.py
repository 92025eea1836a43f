# ============================================================================
# Cryptsy Private API Client v1.0.0
# Cryptsy API Client
# ============================================================================
#
# Purpose: Endpoint methods for the Cryptsy private API
#
# Pipeline per call:
#   params -> CryptsySigner (nonce + HMAC-SHA512)
#          -> HTTPTransport (HTTPS POST)
#          -> unwrap (success / ProtocolError / DecodeError)
#          -> mapper (typed result)
#
# Error Codes:
#   - CRYPTSY-TRN-001: Transport failure
#   - CRYPTSY-API-001: Venue rejected the request
#   - CRYPTSY-DEC-001: Malformed envelope or payload
#   - CRYPTSY-ORD-001: Invalid order type (raised before sending)
#   - CRYPTSY-ORD-002: Unknown market (raised before sending)
#
# ============================================================================

import logging
from typing import Dict, FrozenSet, Mapping, Optional, Tuple, Union

from cryptsy.config import CryptsyConfig
from cryptsy.decimal_gateway import DecimalGateway, Numeric
from cryptsy.envelope import Envelope, unwrap
from cryptsy.errors import DecodeError, TransportError, UnknownMarketError, ErrorCode
from cryptsy.hmac_signer import CryptsySigner
from cryptsy.mappers import (
    map_balances,
    map_created_order_id,
    map_depth,
    map_market_trades,
    map_markets,
    map_order_ids,
)
from cryptsy.models import (
    ActionType,
    Balance,
    Market,
    MarketKey,
    OrderAction,
    OrderBook,
    Trade,
)
from cryptsy.nonce import NonceGenerator
from cryptsy.transport import (
    HTTPTransport,
    DEFAULT_HOST,
    DEFAULT_PATH,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_POOL_SIZE,
)

logger = logging.getLogger(__name__)


class CryptsyClient:
    """
    Cryptsy Private API Client.

    Every call is one stateless signed round trip. Instances may be shared
    between threads; the only shared mutable state is the nonce generator,
    which is locked.

    Example Usage:
        with CryptsyClient(public_key, private_key) as client:
            balances = client.get_balances()
            markets = client.get_markets()
            book = client.get_depth(markets[MarketKey("LTC", "BTC")].market_id)
    """

    def __init__(
        self,
        public_key: str,
        private_key: str,
        host: str = DEFAULT_HOST,
        path: str = DEFAULT_PATH,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        pool_size: int = DEFAULT_POOL_SIZE,
        verify_tls: bool = True,
        resolve_host: bool = True,
        transport: Optional[HTTPTransport] = None,
        nonce_generator: Optional[NonceGenerator] = None,
        correlation_id: Optional[str] = None
    ):
        """
        Initialize the client.

        Args:
            public_key: Public API key
            private_key: Private API key (HMAC key only, never sent)
            host: API host name
            path: API path
            timeout: Request timeout in seconds
            pool_size: Pooled connections to the host
            verify_tls: Validate server certificates
            resolve_host: Resolve the host once at construction
            transport: Pre-built transport (overrides host/path/timeout/pool/TLS)
            nonce_generator: Nonce source (default: shared per public key)
            correlation_id: Audit trail identifier

        Raises:
            MissingCredentialsError: If either key is empty
            TransportError: If host resolution fails
        """
        self.correlation_id = correlation_id
        self.gateway = DecimalGateway()
        self.signer = CryptsySigner(
            public_key,
            private_key,
            nonce_generator=nonce_generator,
            correlation_id=correlation_id
        )
        if transport is None:
            transport = HTTPTransport(
                host=host,
                path=path,
                timeout=timeout,
                pool_size=pool_size,
                verify_tls=verify_tls,
                resolve=resolve_host,
                correlation_id=correlation_id
            )
        self.transport = transport

        logger.info(
            f"[CRYPTSY-CLI] Client initialized | "
            f"public_key={self.signer.get_redacted_key()} | "
            f"correlation_id={correlation_id}"
        )

    @classmethod
    def from_config(
        cls,
        config: CryptsyConfig,
        correlation_id: Optional[str] = None,
        **kwargs
    ) -> "CryptsyClient":
        """Build a client from a validated CryptsyConfig."""
        config.validate()
        return cls(
            config.public_key,
            config.private_key,
            host=config.api_host,
            path=config.api_path,
            timeout=config.timeout_seconds,
            pool_size=config.pool_size,
            verify_tls=config.verify_tls,
            correlation_id=correlation_id,
            **kwargs
        )

    # ========================================================================
    # Account
    # ========================================================================

    def get_balances(self) -> Dict[str, Balance]:
        """
        Available balances per currency code (getinfo).

        Raises:
            TransportError, ProtocolError, DecodeError
        """
        envelope = self._call("getinfo")
        balances = map_balances(envelope.payload)
        logger.info(
            f"[CRYPTSY-CLI] Balances fetched | currencies={len(balances)} | "
            f"correlation_id={self.correlation_id}"
        )
        return balances

    # ========================================================================
    # Market data
    # ========================================================================

    def get_markets(self) -> Dict[MarketKey, Market]:
        """All markets keyed by (primary, secondary, reversed=False)."""
        envelope = self._call("getmarkets")
        markets = map_markets(envelope.payload)
        logger.info(
            f"[CRYPTSY-CLI] Markets fetched | count={len(markets)} | "
            f"correlation_id={self.correlation_id}"
        )
        return markets

    def get_depth(self, market_id: int) -> OrderBook:
        """Buy and sell sides of the order book, in venue order."""
        envelope = self._call("depth", marketid=str(int(market_id)))
        book = map_depth(envelope.payload)
        logger.debug(
            f"[CRYPTSY-CLI] Depth fetched | market_id={market_id} | "
            f"buy={len(book.buy)} | sell={len(book.sell)} | "
            f"correlation_id={self.correlation_id}"
        )
        return book

    def get_market_trades(self, market_id: int) -> Tuple[Trade, ...]:
        """Recent trades on a market (markettrades)."""
        envelope = self._call("markettrades", marketid=str(int(market_id)))
        return map_market_trades(envelope.payload)

    # ========================================================================
    # Orders
    # ========================================================================

    def get_all_my_orders(self) -> FrozenSet[int]:
        """Ids of every open order on the account (allmyorders)."""
        envelope = self._call("allmyorders")
        return map_order_ids(envelope.payload)

    def create_order(
        self,
        market_id: int,
        order_type: Union[ActionType, str],
        quantity: Numeric,
        price: Numeric
    ) -> int:
        """
        Place a limit order.

        Args:
            market_id: Venue market id
            order_type: "buy" or "sell"
            quantity: Amount, sent with 8 fractional digits
            price: Limit price, sent with 8 fractional digits

        Returns:
            Order id assigned by the venue

        Raises:
            InvalidOrderTypeError: If order_type is not buy/sell (nothing is sent)
            ValueError: If quantity or price is not a finite number (nothing is sent)
            TransportError, ProtocolError, DecodeError
        """
        action = ActionType.parse(order_type)
        params = {
            'marketid': str(int(market_id)),
            'ordertype': action.value,
            'quantity': self.gateway.format_fixed(quantity),
            'price': self.gateway.format_fixed(price),
        }

        envelope = self._call("createorder", **params)
        order_id = map_created_order_id(envelope)

        logger.info(
            f"[CRYPTSY-CLI] Order created | order_id={order_id} | "
            f"market_id={market_id} | type={action.value} | "
            f"quantity={params['quantity']} | price={params['price']} | "
            f"correlation_id={self.correlation_id}"
        )
        return order_id

    def submit(self, action: OrderAction, markets: Mapping[MarketKey, Market]) -> int:
        """
        Place the order described by ``action``.

        Args:
            action: Order action addressed by MarketKey
            markets: Market table, usually from get_markets()

        Raises:
            UnknownMarketError: If action.market is not in markets (nothing is sent)
        """
        market = markets.get(action.market)
        if market is None:
            logger.error(
                f"[{ErrorCode.UNKNOWN_MARKET}] Unknown market | "
                f"market={action.market} | correlation_id={self.correlation_id}"
            )
            raise UnknownMarketError(f"No market for {action.market}")
        return self.create_order(market.market_id, action.action, action.quantity, action.price)

    def cancel_order(self, order_id: int) -> None:
        """Cancel one order. Success of the call is the whole result."""
        self._call("cancelorder", orderid=str(int(order_id)))
        logger.info(
            f"[CRYPTSY-CLI] Order cancelled | order_id={order_id} | "
            f"correlation_id={self.correlation_id}"
        )

    def cancel_all_orders(self) -> None:
        """Cancel every open order on the account."""
        self._call("cancelallorders")
        logger.info(
            f"[CRYPTSY-CLI] All orders cancelled | correlation_id={self.correlation_id}"
        )

    # ========================================================================
    # Internal Methods
    # ========================================================================

    def _call(self, method: str, **params: str) -> Envelope:
        """
        Sign, send and unwrap one request.

        A non-2xx response is still decoded so that a venue error message in
        the body surfaces as ProtocolError; a body that does not decode is a
        TransportError carrying the status code.
        """
        params['method'] = method
        signed = self.signer.sign(params)

        logger.debug(
            f"[CRYPTSY-CLI] POST {method} | nonce={signed.nonce} | "
            f"api_key={self.signer.get_redacted_key()} | "
            f"correlation_id={self.correlation_id}"
        )

        response = self.transport.post(signed.body, self.signer.auth_headers(signed))

        if not response.ok:
            try:
                return unwrap(response.content, method=method, correlation_id=self.correlation_id)
            except DecodeError as e:
                logger.error(
                    f"[{ErrorCode.TRANSPORT}] HTTP error | method={method} | "
                    f"status={response.status_code} | correlation_id={self.correlation_id}"
                )
                raise TransportError(
                    f"HTTP {response.status_code} for {method}",
                    status_code=response.status_code
                ) from e

        return unwrap(response.content, method=method, correlation_id=self.correlation_id)

    def close(self) -> None:
        """Close HTTP session."""
        self.transport.close()
        logger.debug(
            f"[CRYPTSY-CLI] Client closed | correlation_id={self.correlation_id}"
        )

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False
