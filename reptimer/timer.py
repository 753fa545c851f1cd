"""Repeating timer with TICK / COMPLETE listeners.

A `RepeatingTimer` fires every `delay` milliseconds. Each firing (a tick)
calls the TICK listeners and bumps `current_count`. With a non-zero
`repeat_count` the timer stops itself once `current_count` reaches it and
then calls the COMPLETE listeners. A `repeat_count` of 0 repeats forever.

    timer = RepeatingTimer(500, 3)
    timer.add_event_listener(Event.TICK, on_tick)
    timer.add_event_listener(Event.COMPLETE, on_done)
    timer.start()

Ticks are driven by a scheduler (see `reptimer.scheduler`), by default the
running asyncio event loop.
"""

import enum
import numbers

from .conf import config
from .exceptions import InvalidArgument
from .log import logger
from .scheduler import AsyncioScheduler


# Event names used by the ActionScript-style API this timer mirrors
_LEGACY_NAMES = {
    'TIMER': 'TICK',
    'TIMER_COMPLETE': 'COMPLETE',
}


class Event(str, enum.Enum):
    TICK = 'TICK'
    COMPLETE = 'COMPLETE'

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str) and value in _LEGACY_NAMES:
            return cls(_LEGACY_NAMES[value])
        return None


def _check_delay(value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not value >= 0:
        raise InvalidArgument(f'"delay" must be a non-negative number, got {value!r}')
    return value


def _check_repeat_count(value):
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
        raise InvalidArgument(f'"repeat_count" must be a non-negative integer, got {value!r}')
    return int(value)


def _check_event(kind):
    try:
        return Event(kind)
    except (ValueError, TypeError):
        raise InvalidArgument(f'Unknown timer event: {kind!r}') from None


class RepeatingTimer:
    """Fires TICK listeners every `delay` ms, `repeat_count` times (0 = forever)"""

    def __init__(self, delay, repeat_count=0, scheduler=None):
        self.current_count = 0  # ticks fired since the last reset
        self.running = False

        self._scheduler = scheduler or AsyncioScheduler()
        self._handle = None
        self._tick = None  # tick callback of the current run
        self._listeners = {event: [] for event in Event}

        self._delay = None
        self._repeat_count = None
        self.set_repeat_count(repeat_count)
        self.set_delay(delay)

    def __repr__(self):
        return (f'<{self.__class__.__name__} delay={self._delay} '
                f'repeat_count={self._repeat_count} current_count={self.current_count} '
                f'running={self.running}>')

    def get_delay(self):
        return self._delay

    def set_delay(self, value):
        """Change the delay. Resets the timer if a delay was already set."""
        if self._delay is not None:
            self.reset()
        self._delay = _check_delay(value)

    def get_repeat_count(self):
        return self._repeat_count

    def set_repeat_count(self, value):
        """Change the repeat count. Resets the timer if one was already set."""
        if self._repeat_count is not None:
            self.reset()
        self._repeat_count = _check_repeat_count(value)

    delay = property(get_delay, set_delay)
    repeat_count = property(get_repeat_count, set_repeat_count)

    @property
    def exhausted(self) -> bool:
        return self._repeat_count != 0 and self.current_count >= self._repeat_count

    def start(self):
        """Start ticking, unless already running or already over.

        After `stop()` the timer runs for the remaining repetitions only.
        """
        if self.running or self.exhausted:
            return

        repeat_count = self._repeat_count
        tick_listeners = self._listeners[Event.TICK]

        def tick():
            # A firing may already be dispatched when stop() cancels the handle
            if self._tick is not tick:
                return

            for listener in tuple(tick_listeners):
                listener()

            # A listener stopped, reset or restarted the timer
            if self._tick is not tick:
                return

            self.current_count += 1
            if repeat_count != 0 and self.current_count >= repeat_count:
                self.stop()
                self.complete()

        self._handle = self._scheduler.schedule(self._delay, tick)
        self._tick = tick
        self.running = True
        logger.debug(f"Timer started: {self!r}")

    def stop(self):
        """Stop ticking. `current_count` is kept."""
        if not self.running:
            return
        self._handle.cancel()
        self._handle = None
        self._tick = None
        self.running = False
        logger.debug(f"Timer stopped: {self!r}")

    def complete(self):
        """Call the COMPLETE listeners"""
        logger.debug(f"Timer complete: {self!r}")
        for listener in tuple(self._listeners[Event.COMPLETE]):
            listener()

    def reset(self):
        """Stop if running and set `current_count` back to 0"""
        self.stop()
        self.current_count = 0
        logger.debug(f"Timer reset: {self!r}")

    def add_event_listener(self, kind, callback):
        """Register `callback` for `kind` (Event.TICK or Event.COMPLETE).
        The same callback may be registered more than once.
        """
        try:
            kind = _check_event(kind)
            if not callable(callback):
                raise InvalidArgument(f'Timer listener must be callable, got {callback!r}')
        except InvalidArgument as e:
            if config.strict_listeners:
                raise
            logger.debug(f"Ignoring listener: {e}")
            return
        self._listeners[kind].append(callback)

    def remove_event_listener(self, kind, callback):
        """Remove one registration of `callback` for `kind`, if any"""
        try:
            kind = _check_event(kind)
        except InvalidArgument as e:
            if config.strict_listeners:
                raise
            logger.debug(f"Ignoring listener removal: {e}")
            return
        try:
            self._listeners[kind].remove(callback)
        except ValueError:
            pass

    def listeners(self, kind):
        return list(self._listeners[_check_event(kind)])
