"""Exceptions for the upcoming library."""


class CalendarError(Exception):
    """Base exception for all upcoming errors."""


class RecurrenceError(CalendarError):
    """Exception raised when evaluating a recurrence rule.

    Errors of this type are contained to a single event by the event list
    pipeline: the event falls back to being treated as a single event and
    the rest of the list is still processed.
    """


class MalformedRuleError(RecurrenceError, ValueError):
    """Exception raised when the fields of a recurrence rule can't be parsed.

    This is also a ValueError so that pydantic reports it as a validation
    error when a raw rule is assigned to a model field.

    The 'message' attribute contains a human-readable message about the
    error that occurred. The 'detailed_error' attribute can provide additional
    information about the error, such as the underlying validation errors,
    useful for debugging purposes.
    """

    def __init__(self, message: str, *, detailed_error: str | None = None) -> None:
        """Initialize the MalformedRuleError with a message."""
        super().__init__(message)
        self.message = message
        self.detailed_error = detailed_error


class UnsupportedFrequencyError(RecurrenceError):
    """Exception raised for a recurrence frequency that can't be evaluated.

    Only YEARLY, MONTHLY, WEEKLY and DAILY rules are supported.
    """
