"""
Base parser interface for all plugin parsers.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..config import Settings
from ..exceptions import ParserDiagnostic
from ..fetcher import Fetcher
from ..models import Release
from .reconcile import order_releases

logger = logging.getLogger(__name__)


class BaseParser(ABC):
    """
    Base parser interface.

    A parser is built for one plugin and loads everything eagerly: by the
    time the constructor returns, `releases` holds the plugin's releases
    newest first. Variants only have to implement load_releases(); they
    share the fetch contract and the output filter/limiter defined here.

    A fault inside load_releases() never escapes the constructor. It is
    logged and kept in `error` so the caller can show a diagnostic
    instead of a partial feed.
    """

    # Logical source name -> URL template with a {plugin} placeholder
    sources: dict[str, str] = {}

    title: Optional[str] = None
    description: Optional[str] = None
    image = {
        'uri': 'https://ps.w.org/{plugin}/assets/icon-128x128.png',
        'height': 128,
        'width': 128,
    }
    link: Optional[str] = None

    def __init__(self, plugin: str, settings: Optional[Settings] = None,
                 fetcher: Optional[Fetcher] = None, stability: Optional[str] = None,
                 feed_link: Optional[str] = None):
        self.plugin = plugin
        self.settings = settings or Settings.from_env()
        if stability:
            self.settings = self.settings.with_overrides(stability=stability)
        self.stability_filter = self.settings.stability_filter

        self._owns_fetcher = fetcher is None
        self.fetcher = fetcher or Fetcher(self.settings)

        self.image = {**self.image, 'uri': self.image['uri'].format(plugin=plugin)}
        self.link = self.link or f"https://wordpress.org/plugins/{plugin}/"
        self.title = self.title or plugin
        self.description = self.description or ""
        self.feed_link = feed_link

        self.releases: dict[str, Release] = {}
        self.modified = None
        self.error: Optional[ParserDiagnostic] = None

        try:
            self.load_releases()
        except Exception as e:
            logger.exception(f"Unexpected error loading releases for {plugin}")
            self.error = ParserDiagnostic.from_exception(plugin, e)
            self.releases = {}

        self._finalize()

    @abstractmethod
    def load_releases(self) -> None:
        """
        Fetch the plugin's sources and populate self.releases.

        Missing or malformed sources must result in fewer (or zero)
        releases, not in an exception.
        """
        raise NotImplementedError

    def fetch(self, source: str = 'profile', append: Optional[str] = None) -> Optional[str]:
        """
        Get the body of a logical source (results are cached).

        Args:
            source: Key of self.sources ("profile", "tags", "changelog"...)
            append: Query string or other suffix added to the resolved URL

        Returns:
            Body text, or None when the source is unknown or unavailable
        """
        template = self.sources.get(source)
        if not template:
            return None
        url = template.format(plugin=self.plugin) + (append or '')
        return self.fetcher.get(url)

    def source_url(self, source: str) -> Optional[str]:
        template = self.sources.get(source)
        return template.format(plugin=self.plugin) if template else None

    def add_release(self, release: Release) -> bool:
        """
        Add a release, keyed by version.

        Releases without a version or a date are dropped. A release for a
        version already present replaces it in place.
        """
        if not release.version or release.created is None:
            logger.debug(f"{self.plugin}: dropping incomplete release {release.title!r}")
            return False

        release.title = release.title or f"{self.title} {release.version}"
        release.description = release.description or ""
        release.link = release.link or self.link
        self.releases[release.version] = release
        return True

    def _finalize(self) -> None:
        """Order releases newest first and derive the feed's modified time."""
        self.releases = order_releases(self.releases)
        self.modified = max((r.created for r in self.releases.values()), default=None)
        logger.info(f"{self.plugin}: {len(self.releases)} releases loaded")

    def get_releases(self, limit: Optional[int] = None) -> list[Release]:
        """
        Get the parsed releases applying stability filter and limit.

        Args:
            limit: Maximum number of releases; None uses the configured
                   output limit, 0 means unlimited

        Returns:
            Sanitized releases, newest first
        """
        if limit is None:
            limit = self.settings.output_limit

        releases = [
            release for release in self.releases.values()
            if self.stability_filter is None or self.stability_filter.search(release.stability)
        ]
        if limit:
            releases = releases[:limit]

        return [release.filter() for release in releases]

    def close(self) -> None:
        """Release network resources and clear expired cache entries."""
        if self._owns_fetcher:
            self.fetcher.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
