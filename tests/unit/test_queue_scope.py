"""
Unit tests for scenario queue scoping.
"""

import pytest

from bullbench.store.service import queue_scope


class TestQueueScope:
    """Tests for queue_scope."""

    @pytest.mark.asyncio
    async def test_purges_around_body(self, fake_service):
        """Test queues are purged before use and purged and released after."""
        async with queue_scope(fake_service, "bench-add-1", "bench-add-2") as service:
            assert service is fake_service
            assert fake_service.purged == ["bench-add-1", "bench-add-2"]

        assert fake_service.purged == ["bench-add-1", "bench-add-2"] * 2
        assert fake_service.released == ["bench-add-1", "bench-add-2"]

    @pytest.mark.asyncio
    async def test_setup_failure_releases_queues(self, fake_service_factory):
        """Test a failing setup purge still releases every queue handle."""
        service = fake_service_factory(fail_purge=True)
        entered = False

        with pytest.raises(ConnectionError):
            async with queue_scope(service, "bench-flow-1", "bench-flow-child-1"):
                entered = True

        assert entered is False
        assert service.released == ["bench-flow-1", "bench-flow-child-1"]

    @pytest.mark.asyncio
    async def test_body_error_wins_over_teardown_error(self, fake_service):
        """Test a teardown failure does not hide the scenario's own error."""
        with pytest.raises(ValueError, match="scenario failed"):
            async with queue_scope(fake_service, "bench-bulk-1"):
                fake_service.fail_purge = True
                raise ValueError("scenario failed")

        assert fake_service.released == ["bench-bulk-1"]

    @pytest.mark.asyncio
    async def test_teardown_error_raised_after_success(self, fake_service):
        """Test a teardown failure surfaces when the body succeeded."""
        with pytest.raises(ConnectionError):
            async with queue_scope(fake_service, "bench-bulk-1"):
                fake_service.fail_purge = True

        assert fake_service.released == ["bench-bulk-1"]
