# ============================================================================
# Cryptsy Private API Client v1.0.0
# Nonce Generator - Strictly increasing per credential
# ============================================================================
#
# Purpose: Produce the `nonce` request parameter
#
# Rules:
#   - Thread-safe with mutex lock
#   - Base value is a nanosecond wall-clock timestamp
#   - If the clock stalls or steps backwards, issue last + 1
#   - One generator per public key, shared by every client using that key
#
# ============================================================================

import time
import threading
import logging
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


class NonceGenerator:
    """
    Thread-safe strictly increasing nonce source.

    Example Usage:
        nonces = NonceGenerator.for_key(public_key)
        params['nonce'] = str(nonces.next())
    """

    _registry: Dict[str, "NonceGenerator"] = {}
    _registry_lock = threading.Lock()

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        """
        Args:
            clock: Callable returning integer nanoseconds (default: time.time_ns)
        """
        self._clock = clock or time.time_ns
        self._last = 0
        self._lock = threading.Lock()

    @classmethod
    def for_key(cls, public_key: str) -> "NonceGenerator":
        """Return the process-wide generator for ``public_key``, creating it once."""
        with cls._registry_lock:
            generator = cls._registry.get(public_key)
            if generator is None:
                generator = cls()
                cls._registry[public_key] = generator
            return generator

    @classmethod
    def reset_registry(cls) -> None:
        """Forget all per-key generators (tests only)."""
        with cls._registry_lock:
            cls._registry.clear()

    @property
    def last(self) -> int:
        """Most recently issued nonce (0 before the first call)."""
        with self._lock:
            return self._last

    def next(self) -> int:
        """
        Issue the next nonce.

        Returns:
            Integer strictly greater than every nonce previously issued by
            this generator
        """
        with self._lock:
            candidate = int(self._clock())
            if candidate <= self._last:
                logger.debug(
                    f"[CRYPTSY-NONCE] Clock did not advance, bumping nonce | "
                    f"clock={candidate} | last={self._last}"
                )
                candidate = self._last + 1
            self._last = candidate
            return candidate
