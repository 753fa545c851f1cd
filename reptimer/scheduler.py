import asyncio

from .conf import config


#  schedule and execute periodic callbacks on an asyncio event loop
class Interval:
    """Periodic callback, rescheduled with `call_later` after every firing"""
    def __init__(self, interval, callback, loop=None):
        self.interval = interval  # seconds between firings, or a callable returning them
        self.callback = callback
        self.loop = loop or config.loop or asyncio.get_running_loop()

        self.handler = None
        self.is_active = False

    @property
    def active(self):
        return self.is_active

    def start(self):
        self.is_active = True
        self.handler = self.loop.call_later(self.get_interval(), self._run)

    # The next firing is registered only once the callback has returned,
    # so firings never overlap. A raising callback still gets rescheduled;
    # the error goes to the loop's exception handler.
    def _run(self):
        if not self.is_active:
            return
        fired = self.handler
        try:
            self.callback()
        finally:
            if self.is_active and self.handler is fired:
                self.start()

    def stop(self):
        self.is_active = False
        if self.handler is not None:
            self.handler.cancel()
            self.handler = None

    cancel = stop

    def get_interval(self):
        return self.interval() if callable(self.interval) else self.interval


class AsyncioScheduler:
    """Hands out `Interval`s; delays are given in `config.time_unit` units"""

    def __init__(self, loop=None):
        self.loop = loop

    def schedule(self, delay, callback):
        interval = Interval(delay * config.time_unit, callback, loop=self.loop)
        interval.start()
        return interval
