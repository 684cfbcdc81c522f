"""
Shared fixtures for the sysmetrics tests.
"""

import pytest

from sysmetrics.agent.sender import SendResult


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSource:
    """
    Scripted metric source.

    Each family is a list of per-tick results; an Exception instance is
    raised instead of returned. The CPU read advances the clock by its
    measurement window, as the real blocking read does.
    """

    def __init__(self, clock=None, cpu=None, mem=None, temps=None, net=None):
        self.clock = clock
        self.cpu = list(cpu or [])
        self.mem = list(mem or [])
        self.temps = list(temps or [])
        self.net = list(net or [])
        self.calls = []

    def _next(self, family, values, default):
        self.calls.append(family)
        value = values.pop(0) if values else default
        if isinstance(value, Exception):
            raise value
        return value

    def cpu_percent(self, interval):
        if self.clock is not None:
            self.clock.advance(interval)
        return self._next("cpu", self.cpu, RuntimeError("no cpu reading scripted"))

    def memory_percent(self):
        return self._next("mem", self.mem, RuntimeError("no mem reading scripted"))

    def temperatures(self):
        return self._next("temp", self.temps, [])

    def net_counters(self):
        return self._next("net", self.net, RuntimeError("no net reading scripted"))


class RecordingSender:
    """Sender stand-in that records every aggregate handed to it."""

    endpoint = "http://collector.test:8080/metric"

    def __init__(self, result=None, error=None):
        self.sent = []
        self.result = result or SendResult(success=True, status_code=200)
        self.error = error

    async def send(self, aggregate):
        self.sent.append(aggregate)
        if self.error:
            raise self.error
        return self.result

    async def close(self):
        pass


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def make_source(clock):
    """Factory for scripted sources sharing the test clock."""
    def factory(**families):
        return FakeSource(clock=clock, **families)
    return factory


@pytest.fixture
def make_sender():
    return RecordingSender
