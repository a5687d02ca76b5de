"""Bounded concurrency pipeline over a ``ThreadPoolExecutor``.

Keeps at most ``limit`` tasks in flight out of an arbitrarily long (lazily
consumed) sequence and hands each result back to the caller's thread, so the
caller can write results and report progress without any locking.

Two delivery modes:

* :meth:`BoundedPipeline.ordered`    — submission order; a completed result
  waiting behind a slower predecessor still occupies one of the ``limit``
  slots, which bounds memory.
* :meth:`BoundedPipeline.unordered`  — completion order; a new task starts
  as soon as any running one finishes.
"""

from __future__ import annotations

from collections import deque
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from itertools import islice
from typing import Callable, Deque, Dict, Generic, Iterable, Iterator, Tuple, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class BoundedPipeline(Generic[T, R]):
    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError(f"concurrency limit must be at least 1, got {limit}")
        self.limit = limit

    def ordered(self, tasks: Iterable[T], work: Callable[[T], R]) -> Iterator[Tuple[T, R]]:
        """Yield ``(task, work(task))`` in the order *tasks* were given.

        An exception raised by *work* is re-raised when its result comes up
        for delivery.
        """
        source = iter(tasks)
        with ThreadPoolExecutor(max_workers=self.limit) as pool:
            pending: Deque[Tuple[T, Future]] = deque(
                (task, pool.submit(work, task)) for task in islice(source, self.limit)
            )
            while pending:
                task, future = pending.popleft()
                result = future.result()
                # Refill before handing the result over so the pool stays busy
                # while the caller writes.
                for nxt in islice(source, 1):
                    pending.append((nxt, pool.submit(work, nxt)))
                yield task, result

    def unordered(self, tasks: Iterable[T], work: Callable[[T], R]) -> Iterator[Tuple[T, R]]:
        """Yield ``(task, work(task))`` as each task completes."""
        source = iter(tasks)
        with ThreadPoolExecutor(max_workers=self.limit) as pool:
            running: Dict[Future, T] = {
                pool.submit(work, task): task for task in islice(source, self.limit)
            }
            while running:
                done, _ = wait(running, return_when=FIRST_COMPLETED)
                for future in done:
                    task = running.pop(future)
                    result = future.result()
                    for nxt in islice(source, 1):
                        running[pool.submit(work, nxt)] = nxt
                    yield task, result
