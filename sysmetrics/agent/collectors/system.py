"""
System Metrics Collector.

Reads CPU, memory, temperature and network counters using psutil.
"""

from dataclasses import dataclass
from typing import Any, Optional
import psutil

from ...errors import SamplingError


# Substrings identifying CPU package/core sensors across drivers
CPU_SENSOR_KEYWORDS = ("cpu", "package", "coretemp", "tdie", "tctl", "cpu_thermal")


@dataclass
class Reading:
    """Outcome of reading one metric family: a value, or a skip with its cause."""
    family: str
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def skipped(cls, family: str, error: str) -> "Reading":
        return cls(family=family, error=error)


@dataclass
class NetworkTotals:
    """Byte counters summed over all non-loopback interfaces."""
    recv_bytes: int
    sent_bytes: int
    interfaces: int


def is_loopback(interface: str) -> bool:
    return interface.lower().startswith("lo")


def is_cpu_sensor(label: str) -> bool:
    label = label.lower()
    return any(keyword in label for keyword in CPU_SENSOR_KEYWORDS)


def cpu_temperature(sensors: list[tuple[str, float]]) -> Optional[float]:
    """Mean of all CPU-related sensors, or None when none matched."""
    temps = [temp for label, temp in sensors if is_cpu_sensor(label)]
    if not temps:
        return None
    return sum(temps) / len(temps)


def network_totals(counters: list[tuple[str, int, int]]) -> NetworkTotals:
    """Sum per-interface counters into one received/sent pair."""
    recv = sent = 0
    for _, recv_bytes, sent_bytes in counters:
        recv += recv_bytes
        sent += sent_bytes
    return NetworkTotals(recv_bytes=recv, sent_bytes=sent, interfaces=len(counters))


class SystemCollector:
    """Collects host metrics using psutil."""

    def cpu_percent(self, interval: float) -> float:
        """CPU utilization measured over a blocking window of `interval` seconds."""
        value = psutil.cpu_percent(interval=interval)
        if value is None:
            raise SamplingError("cpu", "no reading returned")
        return float(value)

    def memory_percent(self) -> float:
        """Virtual memory used percentage."""
        return float(psutil.virtual_memory().percent)

    def temperatures(self) -> list[tuple[str, float]]:
        """(sensor label, celsius) pairs; empty where the platform has no sensor support."""
        if not hasattr(psutil, "sensors_temperatures"):
            return []

        sensors = []
        for chip, entries in (psutil.sensors_temperatures() or {}).items():
            for index, entry in enumerate(entries):
                label = entry.label or str(index)
                sensors.append((f"{chip}_{label}", float(entry.current)))
        return sensors

    def net_counters(self) -> list[tuple[str, int, int]]:
        """(interface, bytes received, bytes sent) for every non-loopback interface."""
        counters = psutil.net_io_counters(pernic=True)
        if counters is None:
            raise SamplingError("net", "no interface counters available")

        return [
            (interface, stats.bytes_recv, stats.bytes_sent)
            for interface, stats in counters.items()
            if not is_loopback(interface)
        ]
