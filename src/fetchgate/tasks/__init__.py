"""
Scheduling subsystem.

Components:
- task_models.py: data structures (QueueState, PendingSlot)
- task_scheduler.py: bounded-concurrency FIFO scheduler with observers
- fetch_api.py: cache-first helper that routes misses through the scheduler
"""
