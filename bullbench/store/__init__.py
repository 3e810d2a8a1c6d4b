"""
Store module.
Contains the Redis connection and the BullMQ-backed queue service.
"""

from bullbench.store.connection import check_redis
from bullbench.store.service import (
    JobHandler,
    JobQueueService,
    close_worker,
    queue_scope,
)

__all__ = [
    "check_redis",
    "JobQueueService",
    "JobHandler",
    "queue_scope",
    "close_worker",
]
