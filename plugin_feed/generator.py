"""
Feed serializer.

Turns a loaded parser (profile metadata + releases) into an Atom or
RSS 2.0 document with feedgen.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from feedgen.feed import FeedGenerator

from .exceptions import ConfigException

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    'atom': 'application/atom+xml',
    'rss': 'application/rss+xml',
}


def build_feed(parser, limit: Optional[int] = None) -> FeedGenerator:
    """
    Build the feedgen document for a parser.

    Args:
        parser: Loaded parser (any BaseParser variant)
        limit: Passed to parser.get_releases()

    Returns:
        FeedGenerator with one entry per release, newest first
    """
    fg = FeedGenerator()
    fg.id(parser.link)
    fg.title(parser.title)
    fg.link(href=parser.link, rel='alternate')
    if parser.feed_link:
        fg.link(href=parser.feed_link, rel='self')
    # RSS requires a non-empty description
    fg.description(parser.description or parser.title)
    fg.language('en')

    image = parser.image or {}
    if image.get('uri'):
        fg.logo(image['uri'])
        fg.image(url=image['uri'], title=parser.title, link=parser.link,
                 width=str(image.get('width', '')) or None,
                 height=str(image.get('height', '')) or None)

    fg.updated(parser.modified or datetime.now(timezone.utc))

    for release in parser.get_releases(limit):
        fe = fg.add_entry(order='append')
        fe.id(f"{release.link}#{release.version}")
        fe.title(release.title)
        fe.link(href=release.link)
        fe.published(release.created)
        fe.updated(release.created)
        fe.content(release.content, type='html')
        if release.description:
            fe.summary(release.description)
        fe.category(term=release.stability)

    return fg


def generate(parser, output_format: Optional[str] = None, limit: Optional[int] = None) -> str:
    """
    Render a parser's releases as a feed document.

    Args:
        parser: Loaded parser
        output_format: "atom" or "rss" (defaults to the parser's settings)
        limit: Maximum number of entries (None uses the configured limit)

    Returns:
        Feed XML as text
    """
    output_format = (output_format or parser.settings.output_format).lower()
    if output_format not in CONTENT_TYPES:
        raise ConfigException(f"Unknown output format: {output_format}", config_key='OUTPUT_FORMAT')

    fg = build_feed(parser, limit)
    logger.debug(f"{parser.plugin}: rendering {len(fg.entry())} entries as {output_format}")

    if output_format == 'rss':
        data = fg.rss_str(pretty=True)
    else:
        data = fg.atom_str(pretty=True)

    if isinstance(data, (bytes, bytearray)):
        data = data.decode('utf-8')
    return data
