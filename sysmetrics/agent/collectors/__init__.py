"""
sysmetrics Collectors.

Read point-in-time values from the host operating system.
"""

from .system import (
    SystemCollector,
    Reading,
    NetworkTotals,
    cpu_temperature,
    network_totals,
)

__all__ = [
    "SystemCollector",
    "Reading",
    "NetworkTotals",
    "cpu_temperature",
    "network_totals",
]
