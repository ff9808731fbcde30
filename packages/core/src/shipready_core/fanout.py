"""Order-preserving concurrent map over blocking collaborator calls."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def fan_out(
    func: Callable[[T], R],
    items: Iterable[T],
    max_workers: int | None = None,
    return_exceptions: bool = False,
) -> list:
    """Run ``func`` over ``items`` concurrently and return results in input order.

    ``max_workers=None`` starts one worker per item (no cap). With
    ``return_exceptions=False`` the exception of the first failing item, in
    input order, is raised once every task has finished; otherwise exceptions
    are returned in place of results. There is no timeout: a hung call hangs
    the caller.
    """
    items = list(items)
    if not items:
        return []

    workers = len(items) if max_workers is None else max(1, min(max_workers, len(items)))
    logger.debug("Fanning out %d task(s) over %d worker(s)", len(items), workers)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(func, item) for item in items]

    results: list = []
    for future in futures:
        exc = future.exception()
        if exc is not None:
            if not return_exceptions:
                raise exc
            results.append(exc)
        else:
            results.append(future.result())
    return results
