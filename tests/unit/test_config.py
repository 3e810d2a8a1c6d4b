"""
Unit tests for settings.
"""

import pytest

from bullbench.config import Settings
from bullbench.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_BULK_CHUNK_SIZE,
    DEFAULT_CONCURRENCY,
    DEFAULT_JOBS_ADD,
    DEFAULT_JOBS_PROCESS,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Drop benchmark settings from the environment."""
    for name in (
        "REDIS_HOST",
        "REDIS_PORT",
        "REDIS_DB",
        "REDIS_PASSWORD",
        "JOBS_ADD",
        "JOBS_BULK",
        "JOBS_PROCESS",
        "BATCH_SIZE",
        "CONCURRENCY",
        "BULK_CHUNK_SIZE",
        "NUM_FLOWS",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        """Test the comparison defaults."""
        settings = Settings(_env_file=None)

        assert settings.redis_url == "redis://localhost:6379/0"
        assert settings.jobs_add == DEFAULT_JOBS_ADD
        assert settings.jobs_process == DEFAULT_JOBS_PROCESS
        assert settings.batch_size == DEFAULT_BATCH_SIZE
        assert settings.concurrency == DEFAULT_CONCURRENCY
        assert settings.bulk_chunk_size == DEFAULT_BULK_CHUNK_SIZE

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch):
        """Test every workload size is read from the environment."""
        monkeypatch.setenv("REDIS_HOST", "redis.internal")
        monkeypatch.setenv("JOBS_ADD", "5000")
        monkeypatch.setenv("JOBS_PROCESS", "3000")
        monkeypatch.setenv("BATCH_SIZE", "50")
        monkeypatch.setenv("CONCURRENCY", "8")

        config = Settings(_env_file=None).run_configuration()

        assert Settings(_env_file=None).redis_url == "redis://redis.internal:6379/0"
        assert config.jobs_add == 5000
        assert config.jobs_process == 3000
        assert config.batch_size == 50
        assert config.concurrency == 8

    def test_redis_url_with_password(self, monkeypatch: pytest.MonkeyPatch):
        """Test the password is percent-encoded into the URL."""
        monkeypatch.setenv("REDIS_PASSWORD", "p@ss/word")

        assert Settings(_env_file=None).redis_url == "redis://:p%40ss%2Fword@localhost:6379/0"

    def test_num_flows_derived(self):
        """Test flows default to a third of the processing jobs."""
        config = Settings(_env_file=None, jobs_process=1000).run_configuration()

        assert config.num_flows == 333

    def test_jobs_bulk_defaults_to_jobs_add(self):
        """Test bulk addition uses the addition count unless set."""
        config = Settings(_env_file=None, jobs_add=2000).run_configuration()

        assert config.jobs_bulk == 2000

    def test_jobs_bulk_explicit(self, monkeypatch: pytest.MonkeyPatch):
        """Test the bulk job count is read from the environment."""
        monkeypatch.setenv("JOBS_BULK", "7000")

        config = Settings(_env_file=None).run_configuration()

        assert config.jobs_bulk == 7000
        assert config.jobs_add == DEFAULT_JOBS_ADD

    def test_num_flows_explicit(self):
        """Test an explicit flow count wins."""
        config = Settings(_env_file=None, jobs_process=1000, num_flows=10).run_configuration()

        assert config.num_flows == 10

    def test_invalid_number(self, monkeypatch: pytest.MonkeyPatch):
        """Test a malformed size is rejected."""
        monkeypatch.setenv("JOBS_ADD", "many")

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_run_configuration_is_frozen(self):
        """Test the run configuration cannot be mutated."""
        config = Settings(_env_file=None).run_configuration()

        with pytest.raises(AttributeError):
            config.jobs_add = 1
