"""
services/fanout.py

Bounded-concurrency fan-out for multi-request operations.

Results come back in input order. Callers pair results with their inputs by
position (product i -> availability i), so ordering is part of the contract.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Tuple, TypeVar

from config import REZDY_CONCURRENCY

T = TypeVar("T")
R = TypeVar("R")


def bounded_map(fn: Callable[[T], R], items: Iterable[T], concurrency: int = REZDY_CONCURRENCY) -> List[R]:
    """
    Run fn over items with at most `concurrency` calls in flight.
    The first exception (in input order) propagates once every call has finished.
    """
    items = list(items)
    if not items:
        return []
    workers = max(1, min(int(concurrency or 1), len(items)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(fn, item) for item in items]
    # executor shutdown waits for every future
    return [f.result() for f in futures]


def bounded_map_settled(
    fn: Callable[[T], R],
    items: Iterable[T],
    concurrency: int = REZDY_CONCURRENCY,
) -> List[Tuple[R, BaseException]]:
    """Like bounded_map, but each slot is (result, None) or (None, error); nothing raises."""

    def _settle(item: T):
        try:
            return fn(item), None
        except Exception as e:
            return None, e

    return bounded_map(_settle, items, concurrency=concurrency)
