"""
sysmetrics Agent - samples host metrics and reports windowed aggregates.
"""

from .agent import TelemetryAgent, run_agent
from .aggregator import Aggregate, Metric
from .config import AgentConfig
from .rates import CounterState, NetworkRates
from .scheduler import ReportScheduler, SchedulerState
from .sender import MetricSender, SendResult

__all__ = [
    "TelemetryAgent",
    "run_agent",
    "Aggregate",
    "Metric",
    "AgentConfig",
    "CounterState",
    "NetworkRates",
    "ReportScheduler",
    "SchedulerState",
    "MetricSender",
    "SendResult",
]
