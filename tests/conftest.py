import pytest

from reptimer import config


class FakeHandle:
    def __init__(self, scheduler, delay, callback):
        self.scheduler = scheduler
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Scheduler whose ticks are fired by hand"""

    def __init__(self):
        self.handles = []

    def schedule(self, delay, callback):
        handle = FakeHandle(self, delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def live(self):
        return [handle for handle in self.handles if not handle.cancelled]

    def fire(self, times=1):
        """Fire every live registration `times` times"""
        for _ in range(times):
            for handle in self.live:
                handle.callback()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture(autouse=True)
def default_config():
    config.reset()
    yield config
    config.reset()
