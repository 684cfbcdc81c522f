"""
sysmetrics Agent - Main Daemon.

Wires the collector, scheduler and sender together and runs the
sampling loop until SIGINT/SIGTERM.
"""

import asyncio
import logging
import signal
import socket
import sys
from typing import Optional

from .config import AgentConfig
from .collectors import SystemCollector
from .scheduler import ReportScheduler
from .sender import MetricSender
from ..utils import setup_logging

logger = logging.getLogger(__name__)


class TelemetryAgent:
    """
    Main agent daemon.

    Owns the scheduler and the HTTP sender for the lifetime of the process.
    """

    def __init__(self, config: Optional[AgentConfig] = None, source=None):
        """Initialize the agent."""
        self.config = (config or AgentConfig.from_env()).validate()
        self.hostname = socket.gethostname()

        self.sender = MetricSender(
            endpoint=self.config.endpoint,
            timeout=self.config.timeout,
        )
        self.scheduler = ReportScheduler(
            source=source or SystemCollector(),
            sender=self.sender,
            report_interval=self.config.report_interval,
            sample_interval=self.config.sample_interval,
        )

    async def start(self, max_ticks: Optional[int] = None):
        """Run the agent until stopped."""
        logger.info(f"Starting sysmetrics agent on {self.hostname}")
        logger.info(f"Collection endpoint: {self.config.endpoint}")

        # Shutdown is observed by the scheduler between ticks
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, self.stop)
            except (NotImplementedError, RuntimeError):
                logger.debug(f"Signal handler for {sig.name} not supported here")

        try:
            await self.scheduler.run(max_ticks=max_ticks)
        finally:
            for sig in (signal.SIGTERM, signal.SIGINT):
                try:
                    loop.remove_signal_handler(sig)
                except (NotImplementedError, RuntimeError):
                    pass
            await self.sender.close()
            logger.info("Agent stopped")

    def stop(self):
        """Request shutdown; the current tick finishes, no final flush is made."""
        logger.info("Stopping agent...")
        self.scheduler.request_stop()


def run_agent(config: Optional[AgentConfig] = None, max_ticks: Optional[int] = None):
    """Run the agent with logging configured from `config`."""
    config = config or AgentConfig.from_env()
    setup_logging(config.log_level, config.log_file)

    agent = TelemetryAgent(config)

    try:
        asyncio.run(agent.start(max_ticks=max_ticks))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    config_path = sys.argv[1] if len(sys.argv) > 1 else None
    run_agent(AgentConfig.from_yaml(config_path) if config_path else None)
