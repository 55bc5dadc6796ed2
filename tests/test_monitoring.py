# -*- coding: utf-8 -*-
"""
Tests for request monitoring and the shared backend session.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from numora_client.monitoring import PerformanceMonitor
from numora_client.session_manager import SessionManager

POSITIONS = "/api/orderly/positions"
BALANCES = "/api/wallets/balances"


class TestPerformanceMonitor:
    """Test PerformanceMonitor."""

    def test_totals(self):
        monitor = PerformanceMonitor()
        monitor.record_request(POSITIONS, "GET", 200, 40.0)
        monitor.record_request(POSITIONS, "GET", 502, 120.0)

        stats = monitor.statistics
        assert stats.total_requests == 2
        assert stats.successful_requests == 1
        assert stats.failed_requests == 1
        assert stats.avg_duration_ms == 80.0
        assert stats.max_duration_ms == 120.0

    def test_endpoint_stats_counts_trailing_failures(self):
        monitor = PerformanceMonitor()
        monitor.record_request(POSITIONS, "GET", 200, 10.0)
        monitor.record_request(POSITIONS, "GET", 500, 10.0)
        monitor.record_request(POSITIONS, "GET", 503, 10.0)
        monitor.record_request(BALANCES, "GET", 200, 10.0)

        stats = monitor.get_endpoint_stats(POSITIONS)
        assert stats.count == 3
        assert stats.last_status == 503
        assert stats.consecutive_failures == 2
        assert stats.degraded
        assert monitor.degraded_endpoints() == [POSITIONS]

    def test_recovery_clears_degraded(self):
        monitor = PerformanceMonitor()
        monitor.record_request(POSITIONS, "GET", 500, 10.0)
        monitor.record_request(POSITIONS, "GET", 200, 10.0)

        assert not monitor.get_endpoint_stats(POSITIONS).degraded
        assert monitor.degraded_endpoints() == []

    def test_unknown_endpoint(self):
        stats = PerformanceMonitor().get_endpoint_stats("/api/unknown")
        assert stats.count == 0
        assert stats.success_rate == 0.0

    def test_error_rate(self):
        monitor = PerformanceMonitor()
        assert monitor.get_error_rate() == 0.0

        monitor.record_request(POSITIONS, "GET", 200, 10.0)
        monitor.record_request(POSITIONS, "GET", 401, 10.0)
        assert monitor.get_error_rate() == 0.5

    def test_history_is_bounded(self):
        monitor = PerformanceMonitor(max_history=2)
        for status in (500, 200, 200):
            monitor.record_request(POSITIONS, "GET", status, 10.0)

        stats = monitor.get_endpoint_stats(POSITIONS)
        assert stats.count == 2
        assert stats.success_rate == 1.0
        assert monitor.statistics.total_requests == 3


class TestSessionManager:
    """Test SessionManager."""

    @pytest.mark.asyncio
    async def test_reuses_open_session(self, connection_config):
        manager = SessionManager(connection_config)
        session = MagicMock(closed=False)

        with patch.object(manager, '_build_session', return_value=session) as build:
            first = await manager.create_session()
            second = await manager.create_session()

        assert first is second is session
        build.assert_called_once()
        assert manager.open_count == 1
        assert manager.is_open

    @pytest.mark.asyncio
    async def test_reopens_closed_session(self, connection_config):
        manager = SessionManager(connection_config)
        stale = MagicMock(closed=True)
        fresh = MagicMock(closed=False)

        with patch.object(manager, '_build_session', side_effect=[stale, fresh]):
            await manager.create_session()
            session = await manager.create_session()

        assert session is fresh
        assert manager.open_count == 2

    @pytest.mark.asyncio
    async def test_close_session(self, connection_config):
        manager = SessionManager(connection_config)
        session = MagicMock(closed=False)
        session.close = AsyncMock()

        with patch.object(manager, '_build_session', return_value=session):
            await manager.create_session()
        await manager.close_session()

        session.close.assert_awaited_once()
        assert manager.session is None
        assert not manager.is_open

    @pytest.mark.asyncio
    async def test_close_without_session(self, connection_config):
        manager = SessionManager(connection_config)
        await manager.close_session()
        assert manager.open_count == 0
