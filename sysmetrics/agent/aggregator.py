"""
Window Aggregation.

Folds the per-tick observations of a reporting window into running
(count, sum) pairs keyed by metric name.
"""

from dataclasses import dataclass
from typing import Iterator


CPU_PERCENT = "system.cpu.percent"
MEM_USED_PERCENT = "system.mem.used_percent"
CPU_TEMP_C = "system.cpu.temp_c"
NET_RECV_BYTES_PER_SEC = "system.net.recv_bytes_per_sec"
NET_SENT_BYTES_PER_SEC = "system.net.sent_bytes_per_sec"


@dataclass
class Metric:
    """Samples folded into one metric. `value` is a sum, not an average."""
    count: int
    value: float

    @property
    def mean(self) -> float:
        return self.value / self.count

    def to_dict(self) -> dict:
        return {'count': self.count, 'value': self.value}


class Aggregate:
    """
    Metrics accumulated over one reporting window.

    Created empty when the window opens, mutated by every sample and
    handed to the sender as a whole when the window closes.
    """

    def __init__(self):
        self._metrics: dict[str, Metric] = {}

    def add(self, name: str, value: float) -> None:
        """Fold one observation into the named metric."""
        metric = self._metrics.get(name)
        if metric is None:
            self._metrics[name] = Metric(count=1, value=float(value))
        else:
            metric.count += 1
            metric.value += value

    def get(self, name: str):
        return self._metrics.get(name)

    def to_dict(self) -> dict:
        """Wire representation: name -> {"count": int, "value": float}."""
        return {name: m.to_dict() for name, m in self._metrics.items()}

    def __getitem__(self, name: str) -> Metric:
        return self._metrics[name]

    def __contains__(self, name: object) -> bool:
        return name in self._metrics

    def __iter__(self) -> Iterator[str]:
        return iter(self._metrics)

    def __len__(self) -> int:
        return len(self._metrics)

    def __repr__(self) -> str:
        return f"Aggregate({self.to_dict()!r})"
