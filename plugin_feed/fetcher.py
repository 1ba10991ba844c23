"""
Cached HTTP fetcher with retry and exponential backoff.

Parsers never touch the network or the cache directly: they resolve a
logical source name to a URL and call Fetcher.get(), which returns the
body or None.
"""

import logging
import random
import time
from typing import Optional

import requests

from .cache import FileCache, MemoryCache, compute_key
from .config import Settings
from .exceptions import FetchException

logger = logging.getLogger(__name__)


class RetryHandler:
    def __init__(self, max_retries: int = 2, base_delay: float = 1.0):
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.jitter = 0.2  # up to +20% random jitter

    def execute(self, func, *args, **kwargs):
        """Execute with retry and exponential backoff."""
        last_error = None
        attempts = max(1, self.max_retries)
        for attempt in range(attempts):
            try:
                return func(*args, **kwargs)
            except FetchException as e:
                last_error = e
                # Client errors will not get better by retrying
                if e.status_code is not None and 400 <= e.status_code < 500 and e.status_code != 429:
                    break
                if attempt < attempts - 1:
                    delay = self.base_delay * (2 ** attempt) * (1 + self.jitter * random.random())
                    time.sleep(delay)
        raise last_error


class Fetcher:
    """
    Cached GET against resolved source URLs.

    Usage:
        fetcher = Fetcher(settings)
        body = fetcher.get("https://wordpress.org/plugins/akismet/changelog/")
        if body is None:
            ...  # no content for this source
    """

    def __init__(self, settings: Optional[Settings] = None, cache=None,
                 session: Optional[requests.Session] = None, retry_delay: float = 1.0):
        self.settings = settings or Settings()
        if cache is None:
            cache = FileCache(self.settings.cache_dir, ttl=self.settings.cache_ttl)
        self.cache = cache
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': self.settings.user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.5',
        })
        self.retry_handler = RetryHandler(max_retries=self.settings.http_retries,
                                          base_delay=retry_delay)

    @classmethod
    def in_memory(cls, settings: Optional[Settings] = None, session=None) -> "Fetcher":
        """Fetcher backed by a MemoryCache (no files written)."""
        settings = settings or Settings()
        return cls(settings, cache=MemoryCache(ttl=settings.cache_ttl), session=session)

    def _request(self, url: str) -> str:
        try:
            response = self.session.get(url, timeout=self.settings.http_timeout)
        except requests.RequestException as e:
            raise FetchException(f"Request failed: {e}", url=url) from e

        if not 200 <= response.status_code < 300:
            raise FetchException(f"HTTP {response.status_code}", status_code=response.status_code, url=url)
        return response.text

    def get(self, url: str) -> Optional[str]:
        """
        Return the body of `url`, from cache when fresh.

        On network failure a stale cached copy is returned if there is one,
        otherwise None.
        """
        key = compute_key(url)
        cached, hit = self.cache.get(key)
        if hit:
            logger.debug(f"Cache hit for {url}")
            return cached

        try:
            body = self.retry_handler.execute(self._request, url)
        except FetchException as e:
            if cached is not None:
                logger.warning(f"⚠️ Fetch error for {url} ({e}), using stale cache")
                return cached
            logger.warning(f"⚠️ Fetch error for {url}: {e}")
            return None

        self.cache.set(key, body, self.settings.cache_ttl)
        return body

    def close(self) -> None:
        """Clear expired cache entries and release the HTTP session."""
        try:
            self.cache.clear_expired()
        finally:
            self.session.close()
