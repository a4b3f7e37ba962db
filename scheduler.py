"""
Small demonstration driver for the priority event heap.

Builds one queue, schedules a few events, peeks at the next one, completes it
and prints what is left.  It is *not* a scheduler service, only a minimal
script that proves the engine works end-to-end.

Usage
-----
$ python scheduler.py
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from priority_events.datatypes import Event
from priority_events.errors import (
    CompletedLogFullError,
    InvalidEventError,
    QueueEmptyError,
    QueueFullError,
)
from priority_events.heap import PriorityEvents

logger = logging.getLogger(__name__)

DEMO_CAPACITY: int = 10

# (description, day, hour, minute)
DEMO_EVENTS: Tuple[Tuple[str, int, int, int], ...] = (
    ("Project Presentation", 1, 9, 0),
    ("Final Exam", 30, 14, 0),
    ("Team Meeting", 28, 10, 0),
)


# ──────────────────────────────────────────────────────────────────────────
def run_demo(
    events: Iterable[Tuple[str, int, int, int]] = DEMO_EVENTS,
    *,
    capacity: int = DEMO_CAPACITY,
    queue: Optional[PriorityEvents] = None,
) -> str:
    """
    Schedule `events`, complete the first one and return the remaining
    queue rendered one event per line.
    """
    pq = PriorityEvents(capacity) if queue is None else queue

    try:
        for description, day, hour, minute in events:
            pq.add_event(Event(description, day, hour, minute))
    except (InvalidEventError, QueueFullError) as exc:
        print(f"Error adding event: {exc}")

    try:
        print(f"Next event: {pq.peek_next_event()}")
    except QueueEmptyError as exc:
        print(f"Queue is empty: {exc}")

    try:
        done = pq.complete_event()
        print(f"An event has been completed: {done.description}")
    except (QueueEmptyError, CompletedLogFullError) as exc:
        print(f"Unable to complete event: {exc}")

    remaining = pq.snapshot()
    logger.debug("Demo finished: %r", pq)
    return remaining


def main(log_level: int = logging.WARNING) -> None:
    logging.basicConfig(
        level=log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    remaining = run_demo()
    print("Remaining events:")
    print(remaining)


# ───────────────────────── sample run ─────────────────────────
if __name__ == "__main__":
    main()
