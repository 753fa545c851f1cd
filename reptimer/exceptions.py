class TimerError(Exception):
    """Base class for reptimer errors"""


class InvalidArgument(TimerError, ValueError):
    """Raised when a timer is given a value it can't hold:
    negative delay or repeat count, unknown event kind, non-callable listener.
    """
