"""Single-slot authorizer cache.

Holds at most one authorizer, filled on first use and never expired: token
refresh is the credential's job, not the cache's. Concurrent first callers share
one in-flight resolution (single-flight) instead of each resolving.
"""

import logging
from collections.abc import Callable
from threading import Lock

from azauth.auth.authorizer import Authorizer


class AuthorizerCache:
    """Memoize the authorizer returned by ``loader``.

    Args:
        loader: Called on a cache miss. Exceptions propagate and nothing is cached.
        logger: Logger for hit/miss diagnostics.

    Example:
        ```python
        cache = AuthorizerCache(resolver_for_management)
        authorizer = cache.get()  # resolves
        authorizer = cache.get()  # cached
        ```
    """

    def __init__(self, loader: Callable[[], Authorizer], logger: logging.Logger | None = None):
        self._loader = loader
        self._logger = logger or logging.getLogger(__name__)
        self._lock = Lock()
        self._authorizer: Authorizer | None = None

    def get(self) -> Authorizer:
        """Return the cached authorizer, resolving it on first use."""
        authorizer = self._authorizer
        if authorizer is not None:
            self._logger.debug(f"Using cached authorizer for {authorizer.resource}")
            return authorizer

        with self._lock:
            # Double-check: another thread may have filled the slot while we waited
            if self._authorizer is None:
                self._logger.debug("No cached authorizer, resolving")
                self._authorizer = self._loader()
            else:
                self._logger.debug(f"Using cached authorizer for {self._authorizer.resource}")
            return self._authorizer

    def peek(self) -> Authorizer | None:
        """Return the cached authorizer without resolving."""
        return self._authorizer

    def clear(self) -> None:
        with self._lock:
            self._authorizer = None
