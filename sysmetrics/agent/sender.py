"""
Metric Sender.

Posts aggregated window metrics to the collection endpoint. Delivery is
best-effort and at-most-once: failures are logged and the payload dropped.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Optional
import aiohttp

from .aggregator import Aggregate

logger = logging.getLogger(__name__)


@dataclass
class SendResult:
    """Result of a send operation."""
    success: bool
    status_code: int = 0
    error: Optional[str] = None


class MetricSender:
    """
    Sends window aggregates to the collection endpoint.

    One POST per flush with a bounded total timeout, no retries.
    """

    def __init__(self, endpoint: str, timeout: float = 5.0):
        """Initialize the sender."""
        self.endpoint = endpoint
        self.timeout = timeout

        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    def _get_headers(self) -> dict:
        return {
            'Content-Type': 'application/json',
            'User-Agent': 'sysmetrics-agent/1.0',
        }

    def serialize(self, aggregate: Aggregate) -> str:
        """Serialize an aggregate to the JSON wire format. NaN and inf are rejected."""
        return json.dumps(aggregate.to_dict(), allow_nan=False)

    async def send(self, aggregate: Aggregate) -> SendResult:
        """Serialize and deliver one aggregate. Never raises on delivery problems."""
        try:
            payload = self.serialize(aggregate)
        except (TypeError, ValueError) as e:
            logger.error(f"Cannot serialize metrics for {self.endpoint}, dropping window: {e}")
            return SendResult(success=False, error=f"serialization failed: {e}")

        logger.debug(f"POST {self.endpoint}: {payload}")

        result = await self._send_once(payload)
        if result.success:
            logger.debug(f"Sent {len(aggregate)} metrics to {self.endpoint}")
        else:
            logger.warning(f"POST {self.endpoint} failed: {result.error}")
        return result

    async def _send_once(self, payload: str) -> SendResult:
        """Send a single request."""
        try:
            session = await self._get_session()

            async with session.post(
                self.endpoint,
                data=payload,
                headers=self._get_headers(),
            ) as response:
                if 200 <= response.status < 300:
                    return SendResult(success=True, status_code=response.status)

                return SendResult(
                    success=False,
                    status_code=response.status,
                    error=f"unexpected status: {response.status} {response.reason or ''}".rstrip(),
                )

        except asyncio.TimeoutError:
            return SendResult(success=False, error=f"request timed out after {self.timeout}s")
        except aiohttp.ClientError as e:
            return SendResult(success=False, error=str(e) or e.__class__.__name__)

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
