"""
Bounded priority heap of scheduled events (Numba-accelerated).

Capacity is fixed at construction.  The heap is kept as parallel NumPy
buffers indexed by an integer *handle* per stored event:

    heap[0:capacity]          handle at each heap position, -1 when vacant
    stamps[0:capacity]        minutes-into-month key per handle
    chars[0:capacity, 0:W]    description code points per handle, -1 padded

so the percolate kernels below never touch Python objects.  The `Event`
objects themselves live in an object array keyed by the same handle.

Public API
----------
PriorityEvents(capacity, order=None)           → empty heap
PriorityEvents.from_events(values, size, …)    → heapified copy of values[:size]
add_event(event) / peek_next_event() / complete_event()
clear_completed_events() / snapshot()
"""

import logging
from typing import Iterable, List, Optional

import numpy as np
from numba import njit

from priority_events.datatypes import SHARED_ORDER, Event, SortOrder
from priority_events.errors import (
    CompletedLogFullError,
    InvalidEventError,
    QueueEmptyError,
    QueueFullError,
)

logger = logging.getLogger(__name__)

# ──────────────────────────────────────────────────────────────────────────
COMPLETED_LOG_FACTOR: int = 2   # completed log holds this many × capacity
VACANT: int = -1


@njit(cache=True)
def _precedes(stamps, chars, alphabetical: bool, a: int, b: int) -> bool:
    """
    True if handle `a` sorts strictly before handle `b`.
    """
    if alphabetical:
        for k in range(chars.shape[1]):
            ca = chars[a, k]
            cb = chars[b, k]
            if ca != cb:
                return ca < cb
        return False
    return stamps[a] < stamps[b]


@njit(cache=True)
def _sift_up(heap, stamps, chars, alphabetical: bool, i: int):
    while i > 0:
        parent = (i - 1) // 2
        if not _precedes(stamps, chars, alphabetical, heap[i], heap[parent]):
            break
        heap[i], heap[parent] = heap[parent], heap[i]
        i = parent


@njit(cache=True)
def _sift_down(heap, stamps, chars, alphabetical: bool, size: int, i: int):
    """
    Push heap[i] toward the leaves.  On ties the left child wins, and a child
    only displaces the current best on strict improvement.
    """
    while True:
        left = 2 * i + 1
        right = left + 1
        smallest = i
        if left < size and _precedes(
            stamps, chars, alphabetical, heap[left], heap[smallest]
        ):
            smallest = left
        if right < size and _precedes(
            stamps, chars, alphabetical, heap[right], heap[smallest]
        ):
            smallest = right
        if smallest == i:
            return
        heap[i], heap[smallest] = heap[smallest], heap[i]
        i = smallest


@njit(cache=True)
def _heapify(heap, stamps, chars, alphabetical: bool, size: int):
    # last internal node down to the root → O(size)
    for i in range(size // 2 - 1, -1, -1):
        _sift_down(heap, stamps, chars, alphabetical, size, i)


@njit(cache=True)
def _pop_root(heap, stamps, chars, alphabetical: bool, size: int) -> int:
    """
    Remove heap[0], move the last live handle to the root and sift it down.

    Returns
    -------
    int : the removed handle (caller shrinks its own size counter)
    """
    root = heap[0]
    heap[0] = heap[size - 1]
    heap[size - 1] = VACANT
    size -= 1
    if size > 0:
        _sift_down(heap, stamps, chars, alphabetical, size, 0)
    return root


def _encode(description: str) -> np.ndarray:
    return np.fromiter(map(ord, description), dtype=np.int64, count=len(description))


# ──────────────────────────────────────────────────────────────────────────
class PriorityEvents:
    """
    Fixed-capacity min-heap of `Event`s with a log of completed events.

    Ordering is read from `order` (a `SortOrder`) on every mutation.  Heaps
    created without one share `SHARED_ORDER`, so switching it affects all of
    them at once.  Switching never re-heapifies what is already stored.
    """

    __slots__ = (
        "_order",
        "_heap",
        "_stamps",
        "_chars",
        "_events",
        "_free",
        "_size",
        "_completed",
        "_num_completed",
    )

    def __init__(self, capacity: int, order: Optional[SortOrder] = None) -> None:
        if (
            isinstance(capacity, bool)
            or not isinstance(capacity, (int, np.integer))
            or capacity <= 0
        ):
            raise InvalidEventError(f"Capacity must be positive: {capacity!r}")
        capacity = int(capacity)
        self._order = SHARED_ORDER if order is None else order
        self._heap = np.full(capacity, VACANT, dtype=np.int64)
        self._stamps = np.zeros(capacity, dtype=np.int64)
        self._chars = np.full((capacity, 0), VACANT, dtype=np.int64)
        self._events = np.empty(capacity, dtype=object)
        self._free: List[int] = list(range(capacity - 1, -1, -1))
        self._size = 0
        self._completed = np.empty(capacity * COMPLETED_LOG_FACTOR, dtype=object)
        self._num_completed = 0
        logger.debug("Created event heap: capacity=%d order=%r", capacity, self._order)

    @classmethod
    def from_events(
        cls,
        values: Iterable[Event],
        size: int,
        order: Optional[SortOrder] = None,
    ) -> "PriorityEvents":
        """
        Build a valid heap from an oversize array of events.

        Parameters
        ----------
        values : sequence of Event
            Only ``values[:size]`` are stored; ``len(values)`` is the capacity.
        size : int
            Number of live events at the front of `values`.

        Raises
        ------
        InvalidEventError
            If `values` is empty or None, `size` is out of range, or any of
            the first `size` entries is not an uncompleted `Event`.
        """
        if values is None:
            raise InvalidEventError("Events array cannot be None")
        values = list(values)
        if not values:
            raise InvalidEventError("Cannot heapify into a zero-capacity queue")
        if (
            isinstance(size, bool)
            or not isinstance(size, (int, np.integer))
            or not 0 <= size <= len(values)
        ):
            raise InvalidEventError(
                f"Size {size!r} out of range for {len(values)} slots"
            )
        live = values[:size]
        for ev in live:
            if not isinstance(ev, Event):
                raise InvalidEventError(f"Not an event: {ev!r}")
            if ev.is_complete:
                raise InvalidEventError("Cannot heapify a completed event")

        pq = cls(len(values), order)
        for handle, ev in enumerate(live):
            pq._store(handle, ev, pq._encoded(ev))
        pq._heap[:size] = np.arange(size, dtype=np.int64)
        pq._free = list(range(len(values) - 1, size - 1, -1))
        pq._size = int(size)
        _heapify(pq._heap, pq._stamps, pq._chars, pq._order.alphabetical, pq._size)
        logger.debug("Heapified %d events into capacity %d", size, len(values))
        return pq

    # ───────────────────────── ordering mode ─────────────────────────
    @staticmethod
    def is_sorted_alphabetically() -> bool:
        return SHARED_ORDER.is_alphabetical

    @staticmethod
    def sort_alphabetically() -> None:
        """Switch every heap using the shared order to description order."""
        SHARED_ORDER.sort_alphabetically()

    @staticmethod
    def sort_chronologically() -> None:
        """Switch every heap using the shared order to timestamp order."""
        SHARED_ORDER.sort_chronologically()

    @property
    def order(self) -> SortOrder:
        return self._order

    # ────────────────────────── queries ──────────────────────────
    @property
    def capacity(self) -> int:
        return len(self._heap)

    def is_empty(self) -> bool:
        return self._size == 0

    def size(self) -> int:
        """Live events, not counting the completed log."""
        return self._size

    def num_completed(self) -> int:
        return self._num_completed

    def __len__(self) -> int:
        return self._size

    def peek_next_event(self) -> Event:
        """
        Next event by priority, left in place.

        Raises
        ------
        QueueEmptyError
            If the queue holds no events.
        """
        if self._size == 0:
            raise QueueEmptyError("Priority queue is empty")
        return self._events[self._heap[0]]

    def heap_data(self) -> List[Event]:
        """Live events in heap-array order (a copy)."""
        return [self._events[h] for h in self._heap[: self._size]]

    def completed_events(self) -> List[Event]:
        """Completed log in completion order, without clearing it."""
        return list(self._completed[: self._num_completed])

    # ───────────────────────── mutation ─────────────────────────
    def add_event(self, event: Event) -> None:
        """
        Insert `event` in O(log N).

        Raises
        ------
        InvalidEventError
            If `event` is None, not an `Event`, or already completed.
        QueueFullError
            If the heap is at capacity.
        """
        if not isinstance(event, Event) or event.is_complete:
            raise InvalidEventError(f"Invalid event to add: {event!r}")
        if self._size >= self.capacity:
            raise QueueFullError("Priority queue is full")
        # widen (may allocate) before any handle leaves the free list
        codes = self._encoded(event)
        handle = self._free.pop()
        self._store(handle, event, codes)
        idx = self._size
        self._heap[idx] = handle
        self._size += 1
        _sift_up(self._heap, self._stamps, self._chars, self._order.alphabetical, idx)

    def complete_event(self) -> Event:
        """
        Remove the next event, mark it complete and append it to the log.

        Returns
        -------
        Event : the event that was completed

        Raises
        ------
        QueueEmptyError
            If the queue holds no events.
        CompletedLogFullError
            If the completed log already holds ``2 × capacity`` events.
        """
        if self._size == 0:
            raise QueueEmptyError("Priority queue is empty")
        if self._num_completed >= len(self._completed):
            raise CompletedLogFullError("Completed array is full")
        event = self._remove_best()
        event.mark_complete()
        self._completed[self._num_completed] = event
        self._num_completed += 1
        logger.debug("Completed %s (%d left)", event, self._size)
        return event

    def clear_completed_events(self) -> List[Event]:
        """Return the completed log in completion order and empty it."""
        drained = self.completed_events()
        self._num_completed = 0
        logger.debug("Drained %d completed events", len(drained))
        return drained

    # ───────────────────────── rendering ─────────────────────────
    def copy(self) -> "PriorityEvents":
        """
        Independent copy of buffers and counters.  Events and the order
        object are shared, not duplicated.
        """
        dup = PriorityEvents.__new__(PriorityEvents)
        dup._order = self._order
        dup._heap = self._heap.copy()
        dup._stamps = self._stamps.copy()
        dup._chars = self._chars.copy()
        dup._events = self._events.copy()
        dup._free = list(self._free)
        dup._size = self._size
        dup._completed = self._completed.copy()
        dup._num_completed = self._num_completed
        return dup

    def snapshot(self) -> str:
        """
        All live events in ascending order, one per line, no trailing
        newline.  Works on a copy; this queue is not modified.
        """
        temp = self.copy()
        lines = []
        while temp._size > 0:
            lines.append(str(temp._remove_best()))
        return "\n".join(lines)

    def __str__(self):
        return self.snapshot()

    def __repr__(self):
        return (
            f"PriorityEvents(size={self._size}, capacity={self.capacity}, "
            f"completed={self._num_completed}, order={self._order!r})"
        )

    # ───────────────────────── internals ─────────────────────────
    def _encoded(self, event: Event) -> np.ndarray:
        codes = _encode(event.description)
        if len(codes) > self._chars.shape[1]:
            self._widen(len(codes))
        return codes

    def _store(self, handle: int, event: Event, codes: np.ndarray) -> None:
        # `codes` must already fit the current width
        self._stamps[handle] = event.stamp
        row = self._chars[handle]
        row[:] = VACANT
        row[: len(codes)] = codes
        self._events[handle] = event

    def _widen(self, width: int) -> None:
        # capacity is fixed; only the description width grows
        chars = np.full((self.capacity, width), VACANT, dtype=np.int64)
        chars[:, : self._chars.shape[1]] = self._chars
        self._chars = chars

    def _remove_best(self) -> Event:
        handle = _pop_root(
            self._heap, self._stamps, self._chars, self._order.alphabetical, self._size
        )
        self._size -= 1
        event = self._events[handle]
        self._events[handle] = None
        self._free.append(handle)
        return event
