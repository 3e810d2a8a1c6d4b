"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables with sensible defaults.
"""

from functools import lru_cache
from urllib.parse import quote

from pydantic_settings import BaseSettings, SettingsConfigDict

from bullbench.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_BULK_CHUNK_SIZE,
    DEFAULT_CONCURRENCY,
    DEFAULT_JOBS_ADD,
    DEFAULT_JOBS_PROCESS,
    DEFAULT_PROCESSING_TIMEOUT_SECONDS,
)
from bullbench.types.benchmark import RunConfiguration


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str | None = None

    # Workload sizes (comparison suite)
    jobs_add: int = DEFAULT_JOBS_ADD
    jobs_bulk: int | None = None  # defaults to jobs_add
    jobs_process: int = DEFAULT_JOBS_PROCESS
    batch_size: int = DEFAULT_BATCH_SIZE
    concurrency: int = DEFAULT_CONCURRENCY
    bulk_chunk_size: int = DEFAULT_BULK_CHUNK_SIZE
    num_flows: int | None = None  # defaults to jobs_process // 3
    processing_timeout_seconds: float = DEFAULT_PROCESSING_TIMEOUT_SECONDS

    # Reporting
    runtime_label: str | None = None

    # Observability
    log_level: str = "INFO"
    log_format: str = "console"  # json or console
    metrics_textfile: str | None = None
    otel_exporter_otlp_endpoint: str | None = None
    otel_service_name: str = "bullbench"

    @property
    def redis_url(self) -> str:
        """Redis URL handed to BullMQ queues, workers and flow producers."""
        auth = f":{quote(self.redis_password, safe='')}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"

    def run_configuration(self) -> RunConfiguration:
        """
        Freeze the workload settings for one run.

        Returns:
            RunConfiguration: Immutable configuration for the comparison suite.
        """
        jobs_bulk = self.jobs_bulk
        if jobs_bulk is None:
            jobs_bulk = self.jobs_add

        num_flows = self.num_flows
        if num_flows is None:
            num_flows = self.jobs_process // 3

        return RunConfiguration(
            jobs_add=self.jobs_add,
            jobs_bulk=jobs_bulk,
            jobs_process=self.jobs_process,
            batch_size=self.batch_size,
            concurrency=self.concurrency,
            bulk_chunk_size=self.bulk_chunk_size,
            num_flows=num_flows,
            processing_timeout_seconds=self.processing_timeout_seconds,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
