"""
Unit Tests for the nonce generator

Tests:
- Strictly increasing output from a normal clock
- Stalled and backwards clocks are bumped to last + 1
- No duplicates or inversions under concurrent use
"""

import os
import sys
import threading
from typing import List

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from cryptsy.nonce import NonceGenerator


def scripted_clock(values: List[int]):
    iterator = iter(values)
    return lambda: next(iterator)


class TestNonceGenerator:

    def test_uses_clock_when_it_advances(self) -> None:
        generator = NonceGenerator(clock=scripted_clock([100, 200, 300]))
        assert [generator.next() for _ in range(3)] == [100, 200, 300]

    def test_stalled_clock_is_bumped(self) -> None:
        generator = NonceGenerator(clock=scripted_clock([100, 100, 100]))
        assert [generator.next() for _ in range(3)] == [100, 101, 102]

    def test_backwards_clock_is_bumped(self) -> None:
        generator = NonceGenerator(clock=scripted_clock([500, 10, 20, 600]))
        assert [generator.next() for _ in range(4)] == [500, 501, 502, 600]

    def test_last_tracks_most_recent_nonce(self) -> None:
        generator = NonceGenerator(clock=scripted_clock([7, 8]))
        assert generator.last == 0
        generator.next()
        assert generator.last == 7

    def test_default_clock_is_nanoseconds(self) -> None:
        nonce = NonceGenerator().next()
        # nanoseconds since epoch has at least 19 digits after 2001
        assert len(str(nonce)) >= 19

    def test_registry_returns_same_instance_per_key(self) -> None:
        NonceGenerator.reset_registry()
        assert NonceGenerator.for_key("a") is NonceGenerator.for_key("a")
        assert NonceGenerator.for_key("a") is not NonceGenerator.for_key("b")
        NonceGenerator.reset_registry()


class TestConcurrency:

    def test_concurrent_callers_never_duplicate(self) -> None:
        # Constant clock forces every nonce through the bump path
        generator = NonceGenerator(clock=lambda: 1_000)
        results: List[List[int]] = [[] for _ in range(8)]
        barrier = threading.Barrier(8)

        def worker(slot: int) -> None:
            barrier.wait()
            for _ in range(500):
                results[slot].append(generator.next())

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        issued = [nonce for per_thread in results for nonce in per_thread]
        assert len(issued) == len(set(issued)) == 4000
        assert sorted(issued) == list(range(1_000, 5_000))

        # Each thread sees its own nonces in strictly increasing order
        for per_thread in results:
            assert per_thread == sorted(per_thread)
            assert len(per_thread) == len(set(per_thread))
