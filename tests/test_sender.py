"""
Tests for the HTTP metric sender, against a local aiohttp server.
"""

import asyncio
import json
import logging

import pytest
from aiohttp import web
from aiohttp import test_utils

from sysmetrics.agent.aggregator import Aggregate, CPU_PERCENT, MEM_USED_PERCENT
from sysmetrics.agent.sender import MetricSender


def collector_app(status=200, delay=0.0):
    """Collection endpoint that records every request it receives."""
    received = []

    async def handle_metric(request):
        received.append({
            'content_type': request.headers.get('Content-Type'),
            'body': await request.json(),
        })
        if delay:
            await asyncio.sleep(delay)
        return web.Response(status=status)

    app = web.Application()
    app.router.add_post('/metric', handle_metric)
    return app, received


def sample_aggregate():
    aggregate = Aggregate()
    for value in (60.0, 70.0, 65.0):
        aggregate.add(CPU_PERCENT, value)
    aggregate.add(MEM_USED_PERCENT, 42.0)
    return aggregate


class TestSerialize:
    """Test the JSON wire format."""

    def test_wire_format(self):
        sender = MetricSender("http://localhost:8080/metric")
        payload = json.loads(sender.serialize(sample_aggregate()))

        assert payload == {
            "system.cpu.percent": {"count": 3, "value": 195.0},
            "system.mem.used_percent": {"count": 1, "value": 42.0},
        }

    def test_nan_rejected(self):
        aggregate = Aggregate()
        aggregate.add(CPU_PERCENT, float("nan"))

        with pytest.raises(ValueError):
            MetricSender("http://localhost:8080/metric").serialize(aggregate)


class TestSend:
    """Test delivery outcomes."""

    @pytest.mark.asyncio
    async def test_success(self):
        app, received = collector_app(status=200)

        async with test_utils.TestServer(app) as server:
            async with MetricSender(str(server.make_url('/metric'))) as sender:
                result = await sender.send(sample_aggregate())

        assert result.success
        assert result.status_code == 200
        assert len(received) == 1
        assert received[0]['content_type'] == 'application/json'
        assert received[0]['body']["system.cpu.percent"] == {"count": 3, "value": 195.0}

    @pytest.mark.asyncio
    async def test_any_2xx_is_success(self):
        app, _ = collector_app(status=204)

        async with test_utils.TestServer(app) as server:
            async with MetricSender(str(server.make_url('/metric'))) as sender:
                result = await sender.send(sample_aggregate())

        assert result.success
        assert result.status_code == 204

    @pytest.mark.asyncio
    async def test_non_2xx_is_failure(self, caplog):
        app, received = collector_app(status=500)

        async with test_utils.TestServer(app) as server:
            url = str(server.make_url('/metric'))
            async with MetricSender(url) as sender:
                with caplog.at_level(logging.WARNING):
                    result = await sender.send(sample_aggregate())

        assert not result.success
        assert result.status_code == 500
        assert "unexpected status: 500" in result.error
        # Exactly one attempt, no retry
        assert len(received) == 1
        assert f"POST {url} failed" in caplog.text

    @pytest.mark.asyncio
    async def test_connection_refused(self, caplog):
        app, _ = collector_app()
        server = test_utils.TestServer(app)
        await server.start_server()
        url = str(server.make_url('/metric'))
        await server.close()

        async with MetricSender(url) as sender:
            with caplog.at_level(logging.WARNING):
                result = await sender.send(sample_aggregate())

        assert not result.success
        assert result.status_code == 0
        assert result.error
        assert url in caplog.text

    @pytest.mark.asyncio
    async def test_timeout(self):
        app, received = collector_app(delay=1.0)

        async with test_utils.TestServer(app) as server:
            async with MetricSender(str(server.make_url('/metric')), timeout=0.2) as sender:
                result = await sender.send(sample_aggregate())

        assert not result.success
        assert "timed out" in result.error
        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_serialization_failure_skips_request(self, caplog):
        app, received = collector_app()
        aggregate = Aggregate()
        aggregate.add(CPU_PERCENT, float("inf"))

        async with test_utils.TestServer(app) as server:
            async with MetricSender(str(server.make_url('/metric'))) as sender:
                with caplog.at_level(logging.ERROR):
                    result = await sender.send(aggregate)

        assert not result.success
        assert "serialization failed" in result.error
        assert received == []
        assert "Cannot serialize metrics" in caplog.text

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        sender = MetricSender("http://localhost:8080/metric")
        await sender.close()
        await sender.close()
