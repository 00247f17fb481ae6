"""Generic fan-out/fan-in runner shared by contract extraction and firmware scanning.

A ``ConcurrentPipeline`` run has three roles connected by two bounded
queues, each holding at most ``workers`` items:

1. **Source** (one thread) -- enumerates the run's items into queue A.
2. **Transform** (``workers`` threads) -- each worker pops items from
   queue A and hands every non-None transform result to queue B. A
   transform returning None means "nothing to report" for that item and
   is not an error.
3. **Aggregate** (one thread) -- drains queue B until end-of-stream and
   folds the arrivals into the run's output. Arrival order is whatever the
   workers produce, so aggregates must not rely on it.

End-of-stream is a private sentinel: the source appends one per worker to
queue A, and the runner appends one to queue B only after every worker has
returned. A full queue blocks its producer, an empty one its consumer.

The first error raised by any role aborts the whole run: every blocked
hand-off gives up, queued items are discarded and ``run`` raises. There is
no partial output.
"""

from __future__ import annotations

import logging
import os
import queue
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from typing import Generic, TypeVar

from hazard_certifier.exceptions import ConcurrencyError, HazardCertifierError

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
ItemT = TypeVar("ItemT")
ResultT = TypeVar("ResultT")
OutputT = TypeVar("OutputT")

# Seconds a blocked hand-off waits before re-checking the abort flag.
_POLL_INTERVAL = 0.05

_END_OF_STREAM = object()


def default_workers() -> int:
    """Return the default transform pool size: one less than the CPU count, at least 1."""
    return max((os.cpu_count() or 1) - 1, 1)


class _Aborted(Exception):
    """Raised inside a role when another role already failed the run."""


class _RunState:
    """Abort flag and first-error slot shared by the roles of one run."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._aborted = threading.Event()
        self.error: BaseException | None = None

    @property
    def aborted(self) -> bool:
        return self._aborted.is_set()

    def fail(self, exc: BaseException) -> None:
        with self._lock:
            if self.error is None:
                self.error = exc
            self._aborted.set()

    def put(self, channel: queue.Queue, item: object) -> None:
        while True:
            if self.aborted:
                raise _Aborted
            try:
                channel.put(item, timeout=_POLL_INTERVAL)
                return
            except queue.Full:
                continue

    def get(self, channel: queue.Queue) -> object:
        while True:
            if self.aborted:
                raise _Aborted
            try:
                return channel.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                continue


class ConcurrentPipeline(ABC, Generic[InputT, ItemT, ResultT, OutputT]):
    """Source -> transform pool -> aggregate runner.

    Subclasses implement ``transform`` and usually override ``source`` and
    ``aggregate``. The default source yields the input items unchanged and
    the default aggregate collects results into a list.

    Usage::

        class Squares(ConcurrentPipeline[list[int], int, int, list[int]]):
            def transform(self, item: int) -> int | None:
                return item * item

        Squares().run([1, 2, 3], workers=2)   # [1, 4, 9] in some order
    """

    def source(self, items: InputT) -> Iterable[ItemT]:
        """Enumerate the items of a run. Runs on the source thread."""
        return items  # type: ignore[return-value]

    @abstractmethod
    def transform(self, item: ItemT) -> ResultT | None:
        """Process one item. Return None when the item yields nothing."""

    def aggregate(self, results: Iterable[ResultT]) -> OutputT:
        """Fold every transform result into the run output."""
        return list(results)  # type: ignore[return-value]

    def run(self, items: InputT, workers: int | None = None) -> OutputT:
        """Execute the pipeline over ``items`` and return the aggregate.

        Args:
            items: Input handed to ``source``.
            workers: Transform pool size. Defaults to ``default_workers()``.

        Returns:
            The value returned by ``aggregate``.

        Raises:
            HazardCertifierError: A role raised a library error; it is
                re-raised unchanged.
            ConcurrencyError: A role raised any other exception.
        """
        if workers is None:
            workers = default_workers()
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")

        inbound: queue.Queue = queue.Queue(maxsize=workers)
        outbound: queue.Queue = queue.Queue(maxsize=workers)
        state = _RunState()
        name = type(self).__name__

        def produce() -> None:
            for item in self.source(items):
                state.put(inbound, item)
            for _ in range(workers):
                state.put(inbound, _END_OF_STREAM)

        def work() -> None:
            while True:
                item = state.get(inbound)
                if item is _END_OF_STREAM:
                    return
                result = self.transform(item)  # type: ignore[arg-type]
                if result is not None:
                    state.put(outbound, result)

        def drain() -> Iterator[ResultT]:
            while True:
                result = state.get(outbound)
                if result is _END_OF_STREAM:
                    return
                yield result  # type: ignore[misc]

        output: list[OutputT] = []

        def compose() -> None:
            results = drain()
            output.append(self.aggregate(results))
            # Queue B must be drained to end-of-stream even if aggregate stopped early.
            for _ in results:
                pass

        def guarded(role: Callable[[], None]) -> Callable[[], None]:
            def wrapper() -> None:
                try:
                    role()
                except _Aborted:
                    pass
                except Exception as exc:
                    logger.debug("%s: %s role failed", name, role.__name__, exc_info=True)
                    state.fail(exc)

            return wrapper

        logger.debug("%s: running with %d workers", name, workers)
        with ThreadPoolExecutor(
            max_workers=workers + 2, thread_name_prefix=name
        ) as executor:
            producer = executor.submit(guarded(produce))
            composer = executor.submit(guarded(compose))
            consumers = [executor.submit(guarded(work)) for _ in range(workers)]
            for consumer in consumers:
                consumer.result()
            # Every worker is done: close queue B for the aggregate.
            guarded(lambda: state.put(outbound, _END_OF_STREAM))()
            composer.result()
            producer.result()

        if state.error is not None:
            if isinstance(state.error, HazardCertifierError):
                raise state.error
            raise ConcurrencyError(
                f"{name} pipeline failed: {state.error}"
            ) from state.error
        if not output:
            raise ConcurrencyError(f"{name} pipeline produced no aggregate")
        return output[0]
