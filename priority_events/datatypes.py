"""
Value types shared by the heap engine: scheduled events and the ordering mode.
"""

import datetime as dt

from priority_events.errors import InvalidEventError

# Events carry only day/hour/minute; they all fall in this reference month.
CALENDAR_YEAR: int = 2025
CALENDAR_MONTH: int = 10

_MONTH_START = dt.datetime(CALENDAR_YEAR, CALENDAR_MONTH, 1)


class Event:
    """
    A scheduled event.

    Attributes
    ----------
    description : str
        Free-form label; the alphabetical sort key.
    timestamp : datetime.datetime
        Day/hour/minute inside the reference month; the chronological key.
    stamp : int
        Minutes elapsed since the start of the reference month.
    is_complete : bool
        Set once by `mark_complete`; not part of the event's identity.
    """

    __slots__ = ("_description", "_timestamp", "_complete")

    def __init__(self, description: str, day: int, hour: int, minute: int):
        if not isinstance(description, str):
            raise InvalidEventError(
                f"Event description must be a string: {description!r}"
            )
        if any(isinstance(part, bool) for part in (day, hour, minute)):
            raise InvalidEventError(
                f"Invalid date/time for {description!r}: "
                f"day={day!r} hour={hour!r} minute={minute!r}"
            )
        try:
            timestamp = dt.datetime(CALENDAR_YEAR, CALENDAR_MONTH, day, hour, minute)
        except (TypeError, ValueError) as exc:
            raise InvalidEventError(
                f"Invalid date/time for {description!r}: "
                f"day={day!r} hour={hour!r} minute={minute!r}"
            ) from exc
        self._description = description
        self._timestamp = timestamp
        self._complete = False

    @property
    def description(self) -> str:
        return self._description

    @property
    def timestamp(self) -> dt.datetime:
        return self._timestamp

    @property
    def day(self) -> int:
        return self._timestamp.day

    @property
    def hour(self) -> int:
        return self._timestamp.hour

    @property
    def minute(self) -> int:
        return self._timestamp.minute

    @property
    def stamp(self) -> int:
        return (self._timestamp - _MONTH_START) // dt.timedelta(minutes=1)

    @property
    def is_complete(self) -> bool:
        return self._complete

    def mark_complete(self) -> None:
        """Flag this event as done.  Marking twice is a no-op."""
        self._complete = True

    def compare_timestamp(self, other: "Event") -> int:
        if self._timestamp < other._timestamp:
            return -1
        return 1 if self._timestamp > other._timestamp else 0

    def compare_description(self, other: "Event") -> int:
        if self._description < other._description:
            return -1
        return 1 if self._description > other._description else 0

    def __eq__(self, other):
        if not isinstance(other, Event):
            return NotImplemented
        return (self._description, self._timestamp) == (
            other._description,
            other._timestamp,
        )

    def __hash__(self):
        return hash((self._description, self._timestamp))

    def __repr__(self):
        return (
            f"Event({self._description!r}, {self.day}, {self.hour}, {self.minute})"
        )

    def __str__(self):
        return f"{self._description} on {self._timestamp:%Y-%m-%d at %H:%M}"


class SortOrder:
    """
    Mutable ordering-mode switch.

    Heaps hold a reference to one of these and read it on every mutation, so
    a single instance can be shared to flip several heaps at once.
    """

    __slots__ = ("alphabetical",)

    def __init__(self, alphabetical: bool = False) -> None:
        self.alphabetical = bool(alphabetical)

    @property
    def is_alphabetical(self) -> bool:
        return self.alphabetical

    def sort_alphabetically(self) -> None:
        self.alphabetical = True

    def sort_chronologically(self) -> None:
        self.alphabetical = False

    def __repr__(self):
        mode = "alphabetical" if self.alphabetical else "chronological"
        return f"SortOrder({mode})"


# Default order for every heap built without an explicit `order=`.
SHARED_ORDER = SortOrder()
