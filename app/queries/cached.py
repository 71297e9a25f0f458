"""Result caching for query objects.

A :class:`CachedQuery` wraps a query class and memoizes its materialized
result in a cache store. The cache key combines the query's name, its
normalized parameter fingerprint and an optional version value computed at
call time, so results are reused only while all three agree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Any, Callable, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_EXPIRES_IN = timedelta(minutes=5)

CacheKey = Tuple[str, Tuple[Tuple[str, Any], ...], Any]


@dataclass(frozen=True)
class CachePolicy:
    """Per query type caching configuration.

    ``version_by`` receives the query instance and returns a JSON-serializable
    value; results cached under a different version are never served.
    """

    expires_in: timedelta = DEFAULT_EXPIRES_IN
    version_by: Optional[Callable[[Any], Any]] = None

    @property
    def ttl_seconds(self) -> float:
        return self.expires_in.total_seconds()


class CachedQuery:
    """Memoize ``query_class(scope, params).materialize()`` in ``store``.

    ``query_class`` must accept ``(scope, params)`` and provide
    ``fingerprint()``, ``call()`` and ``materialize()``. Callers that cache
    the same query class over different base scopes should give each wrapper
    its own ``name`` so their entries do not collide.
    """

    def __init__(
        self,
        query_class,
        store,
        policy: Optional[CachePolicy] = None,
        *,
        name: Optional[str] = None,
    ):
        self.query_class = query_class
        self.store = store
        self.policy = policy or getattr(query_class, "cache_policy", None) or CachePolicy()
        self.name = name or f"{query_class.__module__}.{query_class.__qualname__}"

    def configure(
        self,
        *,
        expires_in: Optional[timedelta] = None,
        version_by: Optional[Callable[[Any], Any]] = None,
    ) -> CachePolicy:
        """Replace the expiry and/or version function used for future calls."""
        changes = {}
        if expires_in is not None:
            changes["expires_in"] = expires_in
        if version_by is not None:
            changes["version_by"] = version_by
        self.policy = replace(self.policy, **changes)
        return self.policy

    def call(self, scope=None, params: Optional[Mapping[str, Any]] = None):
        """Return the uncached query description."""
        return self.query_class(scope, params).call()

    def cache_key(self, query) -> CacheKey:
        version = None
        if self.policy.version_by is not None:
            version = self.policy.version_by(query)
        return (self.name, query.fingerprint(), version)

    def cached_call(self, scope=None, params: Optional[Mapping[str, Any]] = None):
        """Return the materialized result, computing it on a cache miss.

        Parameter errors are raised before the store is consulted. Errors
        raised while computing propagate unchanged and nothing is stored.
        """

        query = self.query_class(scope, params)
        key = self.cache_key(query)

        def compute():
            logger.debug("Computing %s for key %r", self.name, key)
            return query.materialize()

        return self.store.fetch(key, self.policy.ttl_seconds, compute)
