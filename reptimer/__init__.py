from .conf import configure, config
from .exceptions import InvalidArgument, TimerError
from .scheduler import AsyncioScheduler, Interval
from .timer import Event, RepeatingTimer


__all__ = [
    'Event',
    'RepeatingTimer',

    'AsyncioScheduler',
    'Interval',

    'InvalidArgument',
    'TimerError',

    'config',
    'configure',
]
