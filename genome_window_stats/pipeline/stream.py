"""
Bounded, thread-fed streams connecting the pipeline stages.

Each stage runs in its own worker thread and hands items downstream through
a bounded hand-off buffer with a small capacity, so a fast producer blocks
until the consumer catches up. All stages of one pipeline share an
`AbortSignal`: the first failure is recorded there, and aborting wakes every
blocked hand-off so each stage stops at once.
"""

import threading
from collections import deque
from typing import Callable, Generic, Iterable, Iterator, List, Optional, TypeVar

from ..exceptions import PipelineAborted
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_END = object()


class AbortSignal:
    """Cooperative cancellation shared by all stages of a pipeline."""

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._handoffs: List["HandOff"] = []
        self.error: Optional[BaseException] = None

    def register(self, handoff: "HandOff"):
        with self._lock:
            self._handoffs.append(handoff)
            aborted = self._event.is_set()
        if aborted:
            handoff.wake()

    def abort(self, error: Optional[BaseException] = None) -> bool:
        """
        Stop the pipeline and wake every blocked hand-off.

        The first real error is kept, even if the pipeline was already
        stopped without one. Returns True when `error` was recorded.
        """
        recorded = False
        with self._lock:
            if error is not None and self.error is None and not isinstance(error, PipelineAborted):
                self.error = error
                recorded = True
            self._event.set()
            handoffs = list(self._handoffs)
        for handoff in handoffs:
            handoff.wake()
        return recorded

    def is_set(self) -> bool:
        return self._event.is_set()

    def raise_if_aborted(self):
        if not self._event.is_set():
            return
        if self.error is not None:
            raise self.error
        raise PipelineAborted("Pipeline was cancelled")


class HandOff:
    """
    FIFO buffer of at most `maxsize` items between two threads. Both ends
    block until there is room or an item, and return as soon as the shared
    signal is aborted.
    """

    def __init__(self, maxsize: int, signal: AbortSignal):
        if maxsize < 1:
            raise ValueError(f"Queue capacity must be at least 1, got {maxsize}")
        self.maxsize = maxsize
        self._signal = signal
        self._items: deque = deque()
        self._closed = False
        self._cond = threading.Condition()
        signal.register(self)

    def put(self, item) -> bool:
        """Append an item, blocking while full. Returns False if aborted."""
        with self._cond:
            while len(self._items) >= self.maxsize and not self._signal.is_set():
                self._cond.wait()
            if self._signal.is_set():
                return False
            self._items.append(item)
            self._cond.notify_all()
            return True

    def get(self):
        """Next item, or the end marker once closed and drained or aborted."""
        with self._cond:
            while not self._items and not self._closed and not self._signal.is_set():
                self._cond.wait()
            if self._signal.is_set() or not self._items:
                return _END
            item = self._items.popleft()
            self._cond.notify_all()
            return item

    def close(self):
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def wake(self):
        with self._cond:
            self._cond.notify_all()

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)


class BoundedStream(Generic[T]):
    """
    Single-pass iterator over the items produced by a worker thread.

    `produce` is called in the worker thread and must return an iterable;
    its items are handed over through a buffer of capacity `maxsize` in
    order. Iterating the stream yields them in the same order, and re-raises
    the pipeline error if any stage failed.
    """

    def __init__(self, name: str, produce: Callable[[], Iterable[T]],
                 maxsize: int = 1, signal: Optional[AbortSignal] = None):
        self.name = name
        self.signal = signal if signal is not None else AbortSignal()
        self._produce = produce
        self._queue = HandOff(maxsize, self.signal)
        self._consumed = False
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    def _run(self):
        produced = 0
        try:
            for item in self._produce():
                if not self._queue.put(item):
                    break
                produced += 1
        except Exception as e:
            if self.signal.abort(e):
                logger.error(f"{self.name} failed: {type(e).__name__}: {e}")
        finally:
            logger.debug(f"{self.name} stopped after {produced} item(s)")
            self._queue.close()

    def __iter__(self) -> Iterator[T]:
        if self._consumed:
            raise RuntimeError(f"{self.name} stream can only be iterated once")
        self._consumed = True
        exhausted = False
        try:
            while True:
                item = self._queue.get()
                if item is _END:
                    break
                yield item
            exhausted = True
            if self.signal.is_set():
                # The worker records its own failure before it exits
                self._thread.join()
                self.signal.raise_if_aborted()
        finally:
            if not exhausted:
                # Consumer stopped early: release the upstream stages.
                self.signal.abort()

    def join(self, timeout: Optional[float] = None):
        self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()
