"""
Report Scheduler.

Samples every metric family once per tick, folds the readings into the
current window and flushes the window to the sender every N seconds.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Callable, Optional

from .aggregator import (
    Aggregate,
    CPU_PERCENT,
    MEM_USED_PERCENT,
    CPU_TEMP_C,
    NET_RECV_BYTES_PER_SEC,
    NET_SENT_BYTES_PER_SEC,
)
from .collectors import Reading, cpu_temperature, network_totals
from .rates import NetworkRates
from .sender import MetricSender, SendResult

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    """Scheduler lifecycle states."""
    SAMPLING = "sampling"
    FLUSHING = "flushing"
    STOPPED = "stopped"


class ReportScheduler:
    """
    Drives the sample/aggregate/flush loop.

    The scheduler is the only owner of the current Aggregate and of the
    network counter baseline; everything runs sequentially on one event
    loop, so neither needs locking. The CPU reading blocks for one
    sample interval and paces the loop.
    """

    def __init__(
        self,
        source,
        sender: MetricSender,
        report_interval: float = 5,
        sample_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        rates: Optional[NetworkRates] = None,
    ):
        """Initialize the scheduler."""
        self.source = source
        self.sender = sender
        self.report_interval = report_interval
        self.sample_interval = sample_interval
        self.clock = clock
        self.rates = rates or NetworkRates()

        self.aggregate = Aggregate()
        self.state = SchedulerState.SAMPLING
        self.ticks = 0
        self._last_flush = clock()
        self._stop = asyncio.Event()

    def request_stop(self) -> None:
        """Ask the loop to stop before its next tick."""
        self._stop.set()

    @property
    def stop_requested(self) -> bool:
        return self._stop.is_set()

    async def run(self, max_ticks: Optional[int] = None) -> None:
        """Tick until a stop is requested (or `max_ticks` ticks have run)."""
        logger.info(
            f"Sampling every {self.sample_interval}s, reporting every {self.report_interval}s "
            f"to {self.sender.endpoint}"
        )

        while True:
            if self.stop_requested or (max_ticks is not None and self.ticks >= max_ticks):
                self.state = SchedulerState.STOPPED
                logger.info(f"Scheduler stopped after {self.ticks} ticks")
                return

            await self.tick()

    async def tick(self) -> Optional[SendResult]:
        """Sample once and flush if the reporting interval has elapsed."""
        await self.sample()
        self.ticks += 1

        if self.clock() - self._last_flush >= self.report_interval:
            return await self.flush()
        return None

    async def sample(self) -> None:
        """Read every family and fold the successful readings into the window."""
        cpu = await self._read("cpu", self.source.cpu_percent, self.sample_interval)
        if cpu.ok:
            self.aggregate.add(CPU_PERCENT, cpu.value)

        mem = await self._read("mem", self.source.memory_percent)
        if mem.ok:
            self.aggregate.add(MEM_USED_PERCENT, mem.value)

        temps = await self._read("temp", self.source.temperatures)
        if temps.ok:
            temp = cpu_temperature(temps.value)
            if temp is not None:
                self.aggregate.add(CPU_TEMP_C, temp)

        net = await self._read("net", self.source.net_counters)
        if net.ok:
            totals = network_totals(net.value)
            rates = self.rates.observe(totals.recv_bytes, totals.sent_bytes)
            if rates is not None:
                # Deltas span one tick; report them per second
                recv, sent = rates
                self.aggregate.add(NET_RECV_BYTES_PER_SEC, recv / self.sample_interval)
                self.aggregate.add(NET_SENT_BYTES_PER_SEC, sent / self.sample_interval)
        else:
            self.rates.invalidate()

    async def flush(self) -> Optional[SendResult]:
        """
        Hand the current window to the sender and start a new one.

        The window is replaced and the flush time recorded whatever the
        delivery outcome; an empty window is not sent.
        """
        self.state = SchedulerState.FLUSHING
        aggregate, self.aggregate = self.aggregate, Aggregate()
        result = None

        try:
            if aggregate:
                result = await self.sender.send(aggregate)
        except Exception as e:
            logger.error(f"Flush to {self.sender.endpoint} failed: {e}")
            result = SendResult(success=False, error=str(e))
        finally:
            self._last_flush = self.clock()
            self.state = SchedulerState.SAMPLING

        return result

    async def _read(self, family: str, func, *args) -> Reading:
        """Run one blocking source read off the loop; failures become skips."""
        loop = asyncio.get_running_loop()
        try:
            value = await loop.run_in_executor(None, func, *args)
        except Exception as e:
            logger.warning(f"{family} read failed: {e}")
            return Reading.skipped(family, str(e))
        return Reading(family=family, value=value)
