"""
sysmetrics - Lightweight host telemetry agent.

Samples CPU, memory, temperature and network throughput once per second,
aggregates the samples over a reporting window and pushes them to a
collection endpoint over HTTP.
"""

__version__ = "1.0.0"
