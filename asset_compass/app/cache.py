# app/cache.py
"""
Read-through cache for whole collections (assets, employees, ...).

Views that aggregate or join collections read them from here. Every mutation
declares which collections it touches; `invalidate` drops exactly those.
"""

import logging
import threading
import time

from flask import current_app

logger = logging.getLogger(__name__)

# mutation kind -> collections that must be reloaded afterwards
INVALIDATION_RULES = {
    'asset': ('assets', 'assignments', 'locations', 'employees', 'dashboard'),
    'asset_return': ('assets', 'assignments', 'employees', 'dashboard'),
    'assignment': ('assignments', 'assets', 'employees', 'dashboard'),
    'employee': ('employees', 'assignments', 'locations', 'assets'),
    'location': ('locations', 'employees', 'assets'),
    'alert': ('alerts',),
    'settings': ('settings',),
}


class CollectionCache:

    def __init__(self, ttl=30, rules=None):
        self.ttl = ttl
        self.rules = rules or INVALIDATION_RULES
        self._entries = {}
        self._generations = {}
        self._epoch = 0
        self._lock = threading.Lock()

    def get(self, key, loader):
        """Return the cached collection for `key`, loading it when stale.

        A load that overlaps an invalidation of `key` is returned to its caller
        but not stored.
        """
        now = time.monotonic()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and now - entry[0] < self.ttl:
                return entry[1]
            generation = (self._epoch, self._generations.get(key, 0))
        value = loader()
        with self._lock:
            if (self._epoch, self._generations.get(key, 0)) == generation:
                self._entries[key] = (now, value)
        return value

    def invalidate(self, mutation):
        try:
            keys = self.rules[mutation]
        except KeyError:
            raise ValueError(f"Unknown mutation kind: {mutation}")
        with self._lock:
            for key in keys:
                self._entries.pop(key, None)
                self._generations[key] = self._generations.get(key, 0) + 1
        logger.debug("Cache invalidated after %s mutation: %s", mutation, ', '.join(keys))

    def clear(self):
        with self._lock:
            self._entries.clear()
            self._epoch += 1

    def __contains__(self, key):
        with self._lock:
            return key in self._entries


def get_cache():
    return current_app.extensions['collection_cache']
