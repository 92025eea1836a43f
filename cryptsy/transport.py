# ============================================================================
# Cryptsy Private API Client v1.0.0
# HTTPS Transport
# ============================================================================
#
# Purpose: POST signed form bodies to the private API endpoint
#
# Rules:
#   - TLS certificate verification ON unless explicitly disabled
#   - Bounded timeout on every request (default 5 seconds)
#   - Pooled keep-alive connections shared across calls
#   - API host resolved once per instance, never in module state
#   - No retries; the caller decides
#
# Error Codes:
#   - CRYPTSY-TRN-001: DNS, TLS, timeout, connection or unreadable body
#
# ============================================================================

import socket
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import Timeout, SSLError, RequestException

from cryptsy.errors import TransportError, ErrorCode

logger = logging.getLogger(__name__)


DEFAULT_PROTOCOL = "https://"
DEFAULT_HOST = "api.cryptsy.com"
DEFAULT_PATH = "/api"
DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_POOL_SIZE = 5


@dataclass(frozen=True)
class HTTPResponse:
    """Status and raw body of a completed round trip."""
    status_code: int
    content: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def resolve_host(host: str, port: int = 443) -> str:
    """
    Resolve ``host`` to its first address.

    Raises:
        TransportError: If resolution fails
    """
    try:
        infos = socket.getaddrinfo(host, port, proto=socket.IPPROTO_TCP)
    except (socket.gaierror, UnicodeError) as e:
        logger.error(
            f"[{ErrorCode.TRANSPORT}] DNS resolution failed | host={host} | error={e}"
        )
        raise TransportError(f"Cannot resolve {host}: {e}") from e
    if not infos:
        raise TransportError(f"Cannot resolve {host}: no addresses")
    return infos[0][4][0]


class HTTPTransport:
    """
    Pooled HTTPS POST transport.

    Example Usage:
        transport = HTTPTransport(timeout=5.0)
        response = transport.post(body, {'Key': key, 'Sign': sign})
        envelope = decode_envelope(response.content)
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        path: str = DEFAULT_PATH,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        pool_size: int = DEFAULT_POOL_SIZE,
        verify_tls: bool = True,
        resolve: bool = True,
        session: Optional[requests.Session] = None,
        correlation_id: Optional[str] = None
    ):
        """
        Args:
            host: API host name
            path: API path on the host
            timeout: Per-request timeout in seconds (must be positive)
            pool_size: Maximum pooled connections to the host
            verify_tls: Validate server certificates (disable only if proven necessary)
            resolve: Resolve the host once at construction and keep the address
            session: Pre-built requests.Session (default: new pooled session)
            correlation_id: Audit trail identifier

        Raises:
            ValueError: If timeout or pool_size is not positive
            TransportError: If host resolution fails
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        if pool_size <= 0:
            raise ValueError(f"pool_size must be positive, got {pool_size}")

        self.host = host
        self.path = path
        self.url = f"{DEFAULT_PROTOCOL}{host}{path}"
        self.timeout = timeout
        self.verify_tls = verify_tls
        self.correlation_id = correlation_id
        self.api_ip: Optional[str] = resolve_host(host) if resolve else None

        if not verify_tls:
            logger.warning(
                f"[CRYPTSY-TRN] TLS certificate verification DISABLED | "
                f"host={host} | correlation_id={correlation_id}"
            )

        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(pool_connections=1, pool_maxsize=pool_size)
            session.mount(DEFAULT_PROTOCOL, adapter)
        self._session = session

        logger.info(
            f"[CRYPTSY-TRN] Transport initialized | "
            f"url={self.url} | api_ip={self.api_ip} | timeout={timeout}s | "
            f"pool_size={pool_size} | correlation_id={correlation_id}"
        )

    def post(self, body: str, headers: Dict[str, str]) -> HTTPResponse:
        """
        Send one form-encoded POST and read the whole body.

        Args:
            body: application/x-www-form-urlencoded request body
            headers: Authentication headers (Key, Sign)

        Returns:
            HTTPResponse with status and raw body

        Raises:
            TransportError: On DNS, TLS, timeout or connection failure, or a
                non-2xx status with an empty body
        """
        data = body.encode('utf-8')
        request_headers = {
            'Connection': 'Keep-Alive',
            'Cache-Control': 'no-cache, must-revalidate',
            'Content-Type': 'application/x-www-form-urlencoded',
            'Content-Length': str(len(data)),
        }
        request_headers.update(headers)

        try:
            response = self._session.post(
                self.url,
                data=data,
                headers=request_headers,
                timeout=self.timeout,
                verify=self.verify_tls
            )
            content = response.content
        except Timeout as e:
            logger.warning(
                f"[{ErrorCode.TRANSPORT}] Timeout | url={self.url} | "
                f"timeout={self.timeout}s | correlation_id={self.correlation_id}"
            )
            raise TransportError(f"Request timed out after {self.timeout}s") from e
        except SSLError as e:
            logger.error(
                f"[{ErrorCode.TRANSPORT}] TLS failure | url={self.url} | "
                f"error={e} | correlation_id={self.correlation_id}"
            )
            raise TransportError(f"TLS failure: {e}") from e
        except RequestException as e:
            logger.error(
                f"[{ErrorCode.TRANSPORT}] Request failed | url={self.url} | "
                f"error={e} | correlation_id={self.correlation_id}"
            )
            raise TransportError(f"Request failed: {e}") from e

        result = HTTPResponse(status_code=response.status_code, content=content or b'')

        if not result.ok and not result.content.strip():
            logger.error(
                f"[{ErrorCode.TRANSPORT}] HTTP error without body | "
                f"status={result.status_code} | correlation_id={self.correlation_id}"
            )
            raise TransportError(
                f"HTTP {result.status_code} with empty body",
                status_code=result.status_code
            )

        logger.debug(
            f"[CRYPTSY-TRN] Response received | status={result.status_code} | "
            f"bytes={len(result.content)} | correlation_id={self.correlation_id}"
        )
        return result

    def close(self) -> None:
        """Close pooled connections."""
        self._session.close()
