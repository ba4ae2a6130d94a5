"""A library for listing the upcoming events of a calendar feed.

Recurring events are evaluated from their recurrence rule and moved to their
next occurrence, so that an event list shows when each event happens next.
"""

__all__ = [
    "config",
    "display",
    "event",
    "exceptions",
    "expression",
    "iter",
    "timeline",
    "types",
    "util",
]
