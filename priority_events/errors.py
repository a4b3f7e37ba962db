"""
Exception hierarchy for the priority event heap.

Every failure is raised at the point of violation and left for the caller;
nothing in the engine catches these.
"""


class EventQueueError(Exception):
    """Base exception for event queue errors."""
    pass


class InvalidEventError(EventQueueError, ValueError):
    """Bad capacity, bad event, or an already-completed event."""
    pass


class QueueEmptyError(EventQueueError, LookupError):
    """Peek or completion requested on an empty queue."""
    pass


class QueueFullError(EventQueueError):
    """Insert attempted while the heap array is at capacity."""
    pass


class CompletedLogFullError(EventQueueError):
    """Completion attempted while the completed log is saturated."""
    pass
