"""
Generic feed parser.

For vendors without a registry profile: a single Atom/RSS feed (or a
plain HTML news page) where release announcements are mixed with other
posts. Entries whose title matches the vendor's release regex become
releases; there is no tag reconciliation.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urljoin

import feedparser
from bs4 import BeautifulSoup

from ..classify import parse_date, parse_stability, parse_version
from ..models import Release
from .base import BaseParser
from .tags import clean_text

logger = logging.getLogger(__name__)


@dataclass
class FeedSource:
    """
    Vendor configuration for the generic feed parser.

    HTML pages are read with CSS selectors:
    - selector: item containers
    - title_selector / link_selector / date_selector / content_selector:
      fields within an item (optional, common patterns are tried otherwise)
    """
    title: str
    url: str
    pattern: str
    description: str = ""
    link: Optional[str] = None
    image: dict = field(default_factory=dict)

    selector: str = 'article'
    title_selector: Optional[str] = None
    link_selector: Optional[str] = None
    date_selector: Optional[str] = None
    content_selector: Optional[str] = None


@dataclass
class FeedEntry:
    """One post of the vendor feed, whatever its format."""
    title: str
    link: str
    content: str
    summary: str
    published: Optional[datetime]


def _struct_to_datetime(value) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime(*value[:6], tzinfo=timezone.utc)
    except (ValueError, TypeError):
        return None


class FeedParser(BaseParser):
    """
    Parser for release announcements in a vendor feed.

    Usage:
        parser = FeedParser('gravityforms', source=FeedSource(
            title='Gravity Forms',
            url='https://www.gravityforms.com/feed/',
            pattern=r'^Gravity Forms v[\\d.]+ Released',
        ))
    """

    def __init__(self, plugin: str, source: FeedSource, **kwargs):
        self.source = source
        self.sources = {'profile': source.url}
        self.title = source.title
        self.description = source.description
        self.link = source.link or source.url
        if source.image:
            self.image = source.image
        self.regexp = re.compile(source.pattern, re.IGNORECASE)
        super().__init__(plugin, **kwargs)

    def load_releases(self) -> None:
        body = self.fetch('profile')
        if not body:
            logger.warning(f"⚠️ {self.plugin}: feed unavailable ({self.source.url})")
            return

        entries = self.parse_feed(body) or self.parse_html(body)
        if not entries:
            logger.warning(f"⚠️ {self.plugin}: no entries parsed from {self.source.url}")
            return

        for entry in entries:
            if not self.regexp.search(entry.title):
                continue

            version = parse_version(entry.title, self.title)
            if not version:
                continue

            summary = entry.summary
            if "<" in summary:
                summary = BeautifulSoup(summary, 'html.parser').get_text(' ', strip=True)

            self.add_release(Release(
                title=f"{self.title} {version}",
                version=version,
                description=clean_text(summary)[:300],
                stability=parse_stability(entry.title),
                created=entry.published,
                content=entry.content or entry.summary,
                link=entry.link or self.source.url,
            ))

    def parse_feed(self, body: str) -> list[FeedEntry]:
        """Parse Atom/RSS content; empty for anything that is not a feed."""
        feed = feedparser.parse(body)
        entries = []

        for item in feed.entries:
            content = ""
            if item.get('content'):
                content = item['content'][0].get('value', '')

            entries.append(FeedEntry(
                title=clean_text(item.get('title')),
                link=item.get('link', ''),
                content=content,
                summary=item.get('summary', '') or '',
                published=_struct_to_datetime(item.get('published_parsed') or item.get('updated_parsed')),
            ))

        return entries

    def parse_html(self, body: str) -> list[FeedEntry]:
        """Parse an HTML news page using the source's CSS selectors."""
        soup = BeautifulSoup(body, 'html.parser')
        entries = []

        for el in soup.select(self.source.selector):
            entry = self._parse_element(el)
            if entry:
                entries.append(entry)

        return entries

    def _parse_element(self, el) -> Optional[FeedEntry]:
        """Parse a single HTML element into a FeedEntry."""
        source = self.source
        title = None
        link = None
        date = None

        # Try to find title
        if source.title_selector:
            title_el = el.select_one(source.title_selector)
            if title_el:
                title = title_el.get_text(strip=True)

        if not title:
            # Try common title patterns
            for tag in ['h1', 'h2', 'h3', 'h4', '.title', 'a']:
                title_el = el.select_one(tag)
                if title_el:
                    title = title_el.get_text(strip=True)
                    break

        if not title:
            return None

        # Try to find link
        link_el = el.select_one(source.link_selector or 'a[href]')
        if link_el:
            link = link_el.get('href')

        # Try to find date
        if source.date_selector:
            date_el = el.select_one(source.date_selector)
            if date_el:
                date = date_el.get('datetime') or date_el.get_text(strip=True)

        if not date:
            date_el = el.select_one('time, .date, .published, [datetime]')
            if date_el:
                date = date_el.get('datetime') or date_el.get_text(strip=True)

        content_el = el.select_one(source.content_selector) if source.content_selector else None
        content = content_el.decode_contents() if content_el else ""

        return FeedEntry(
            title=clean_text(title),
            link=urljoin(source.url, link) if link else "",
            content=content.strip(),
            summary=el.get_text(' ', strip=True),
            published=parse_date(date),
        )
