"""
Key-value cache for fetched source bodies.

Keys are hashes of the fully resolved source URL, so plugins never collide.
Expired entries are still handed out (with hit=False) until
clear_expired() removes them, which lets the fetcher fall back to a stale
copy when the network is down.
"""

import hashlib
import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Optional, Tuple

logger = logging.getLogger(__name__)


def compute_key(url: str) -> str:
    """Compute the cache key of a resolved URL."""
    return hashlib.sha1(url.encode('utf-8')).hexdigest()


class MemoryCache:
    """In-process cache, used for tests and embedding."""

    def __init__(self, ttl: int = 3600):
        self.ttl = ttl
        self._items: dict[str, Tuple[float, Any]] = {}

    def get(self, key: str) -> Tuple[Optional[Any], bool]:
        entry = self._items.get(key)
        if entry is None:
            return None, False
        expires_at, value = entry
        return value, time.time() < expires_at

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self._items[key] = (time.time() + (self.ttl if ttl is None else ttl), value)

    def clear_expired(self) -> int:
        now = time.time()
        expired = [k for k, (expires_at, _) in self._items.items() if expires_at <= now]
        for key in expired:
            del self._items[key]
        return len(expired)


class FileCache:
    """
    Filesystem cache: one JSON file per key.

    Each file stores {"expires_at": <epoch>, "value": <body>}. Writes go
    through a temporary file and a rename so concurrent readers never see
    a half-written entry.
    """

    def __init__(self, cache_dir: Path, ttl: int = 3600):
        self.cache_dir = Path(cache_dir)
        self.ttl = ttl

    def _path(self, key: str) -> Path:
        return self.cache_dir / f"{key}.json"

    def get(self, key: str) -> Tuple[Optional[Any], bool]:
        path = self._path(key)
        try:
            if not path.exists():
                return None, False
            entry = json.loads(path.read_text(encoding='utf-8'))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Error loading cache entry {path.name}: {e}")
            return None, False

        return entry.get('value'), time.time() < entry.get('expires_at', 0)

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        entry = {
            'expires_at': time.time() + (self.ttl if ttl is None else ttl),
            'value': value,
        }
        tmp = None
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.cache_dir, suffix='.tmp')
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(entry, f, ensure_ascii=False)
            os.replace(tmp, self._path(key))
        except OSError as e:
            # A read-only cache directory degrades to no caching
            logger.warning(f"Error saving cache entry {key}: {e}")
        finally:
            # gone after a successful replace
            if tmp is not None:
                Path(tmp).unlink(missing_ok=True)

    def clear_expired(self) -> int:
        """Delete expired entries, return how many were removed."""
        if not self.cache_dir.exists():
            return 0

        removed = 0
        now = time.time()
        for path in self.cache_dir.glob('*.json'):
            try:
                entry = json.loads(path.read_text(encoding='utf-8'))
                if entry.get('expires_at', 0) > now:
                    continue
                path.unlink()
                removed += 1
            except (json.JSONDecodeError, OSError) as e:
                logger.debug(f"Skipping cache file {path.name}: {e}")

        if removed:
            logger.debug(f"Cleared {removed} expired cache entries")
        return removed
