"""Tests for the asyncio-backed periodic scheduler."""
import asyncio

import pytest

from reptimer import AsyncioScheduler, Event, Interval, RepeatingTimer, configure


class TestInterval:

    def test_fires_repeatedly_until_stopped(self):
        async def scenario():
            calls = []
            interval = Interval(0.001, lambda: calls.append(1))
            interval.start()
            while len(calls) < 3:
                await asyncio.sleep(0.001)
            interval.stop()
            fired = len(calls)
            await asyncio.sleep(0.01)
            return interval, fired, len(calls)

        interval, fired, total = asyncio.run(scenario())
        assert fired >= 3
        assert total == fired
        assert interval.active is False

    def test_stop_from_callback(self):
        async def scenario():
            calls = []

            def callback():
                calls.append(1)
                interval.stop()

            interval = Interval(0.001, callback)
            interval.start()
            await asyncio.sleep(0.02)
            return calls

        assert asyncio.run(scenario()) == [1]

    def test_callable_interval(self):
        interval = Interval(lambda: 0.25, lambda: None, loop=object())
        assert interval.get_interval() == 0.25

    def test_raising_callback_keeps_firing(self):
        """Errors reach the loop's exception handler; the interval carries on."""
        async def scenario():
            errors = []
            calls = []
            loop = asyncio.get_running_loop()
            loop.set_exception_handler(lambda loop, context: errors.append(context['exception']))

            def callback():
                calls.append(1)
                if len(calls) == 1:
                    raise RuntimeError("boom")

            interval = Interval(0.001, callback)
            interval.start()
            for _ in range(200):
                if len(calls) >= 3:
                    break
                await asyncio.sleep(0.001)
            active = interval.active
            interval.stop()
            return active, calls, errors

        active, calls, errors = asyncio.run(scenario())
        assert active is True
        assert len(calls) >= 3
        assert len(errors) == 1
        assert isinstance(errors[0], RuntimeError)

    def test_requires_running_loop(self):
        with pytest.raises(RuntimeError):
            Interval(0.001, lambda: None)


class TestAsyncioScheduler:

    def test_delay_converted_with_time_unit(self):
        async def scenario():
            handle = AsyncioScheduler().schedule(250, lambda: None)
            handle.cancel()
            return handle

        handle = asyncio.run(scenario())
        assert handle.get_interval() == pytest.approx(0.25)
        assert handle.active is False

    def test_configured_time_unit(self):
        configure({'TIME_UNIT': 1})

        async def scenario():
            handle = AsyncioScheduler().schedule(2, lambda: None)
            handle.cancel()
            return handle

        assert asyncio.run(scenario()).get_interval() == 2

    def test_repeating_timer_on_event_loop(self):
        """End to end: a real loop drives three ticks then completion."""
        async def scenario():
            log = []
            done = asyncio.Event()
            timer = RepeatingTimer(1, 3)
            timer.add_event_listener(Event.TICK, lambda: log.append("tick"))
            timer.add_event_listener(Event.COMPLETE, lambda: log.append("complete"))
            timer.add_event_listener(Event.COMPLETE, done.set)
            timer.start()
            await asyncio.wait_for(done.wait(), timeout=2)
            await asyncio.sleep(0.01)
            return timer, log

        timer, log = asyncio.run(scenario())
        assert log == ["tick", "tick", "tick", "complete"]
        assert timer.current_count == 3
        assert timer.running is False

    def test_raising_listener_keeps_timer_ticking(self):
        """A listener error does not leave a running timer without a live handle."""
        async def scenario():
            errors = []
            calls = []
            loop = asyncio.get_running_loop()
            loop.set_exception_handler(lambda loop, context: errors.append(context['exception']))

            def flaky():
                calls.append(1)
                if len(calls) == 1:
                    raise RuntimeError("boom")

            timer = RepeatingTimer(1, 0)
            timer.add_event_listener(Event.TICK, flaky)
            timer.start()
            for _ in range(200):
                if len(calls) >= 3:
                    break
                await asyncio.sleep(0.001)
            state = (timer.running, timer._handle.active)
            timer.stop()
            return state, calls, errors

        (running, active), calls, errors = asyncio.run(scenario())
        assert running is True
        assert active is True
        assert len(calls) >= 3
        assert len(errors) == 1
