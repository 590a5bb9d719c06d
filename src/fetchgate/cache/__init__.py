"""
Cache subsystem.

Components:
- cache_models.py: CacheEntry
- result_cache.py: TTL store with single-flight fetches and bounded FIFO eviction
- cache_purger.py: polling loop that purges expired entries
"""
