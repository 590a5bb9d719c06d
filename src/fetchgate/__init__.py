"""
fetchgate: bounded-concurrency fetch scheduling with a TTL cache.

Components:
- tasks/task_scheduler.py: FIFO scheduler that caps concurrently running operations
- cache/result_cache.py: TTL cache with single-flight fetches and FIFO eviction
- tasks/fetch_api.py: cache-first helper that wires the two together
"""

from .cache.result_cache import ResultCache
from .tasks.fetch_api import fetch_cached
from .tasks.task_models import QueueState
from .tasks.task_scheduler import TaskScheduler

__all__ = ["QueueState", "ResultCache", "TaskScheduler", "fetch_cached"]
