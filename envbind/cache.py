"""Cache of resolved variables."""

import logging
import threading
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class VarCache:
    """Thread-safe cache of resolved variables.

    Entries are keyed by config class, or by a tuple of the class and the
    options that shape variable names (see ``Loader.cache_key``). The first
    list stored for a key wins; later puts return the cached list unchanged.
    Reads never block each other once populated.
    """

    def __init__(self):
        """Initialize cache."""
        self._vars: Dict[Hashable, Tuple[Any, ...]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[List[Any]]:
        """Get cached variables.

        Args:
            key: Config class or loader cache key.

        Returns:
            Cached variables or None.
        """
        cached = self._vars.get(key)
        if cached is None:
            return None
        logger.debug("Cache hit for %r", key)
        return list(cached)

    def put(self, key: Hashable, variables: Sequence[Any]) -> List[Any]:
        """Store variables unless the key is already cached.

        Args:
            key: Config class or loader cache key.
            variables: Resolved variables.

        Returns:
            Variables held by the cache after the call.
        """
        with self._lock:
            cached = self._vars.setdefault(key, tuple(variables))
        return list(cached)

    def clear(self) -> None:
        """Remove all cached entries."""
        with self._lock:
            self._vars.clear()

    def __contains__(self, key: Hashable) -> bool:
        return key in self._vars

    def __len__(self) -> int:
        return len(self._vars)
