"""
Parsers package - One parser variant per kind of release source.

Each parser loads the releases of a single plugin when it is built.
"""

from functools import partial

from .base import BaseParser
from .feed import FeedParser, FeedSource
from .registry import RegistryParser
from .proprietary import GRAVITY_FORMS, RevolutionSliderParser, UberMenuParser

# Parser registry by plugin identifier; anything else is a wordpress.org plugin
PARSERS = {
    'gravityforms': partial(FeedParser, source=GRAVITY_FORMS),
    'ubermenu': UberMenuParser,
    'revslider': RevolutionSliderParser,
}


def get_parser(plugin: str, settings=None, fetcher=None, stability=None,
               feed_link=None) -> BaseParser:
    """Get a loaded parser instance for a plugin."""
    factory = PARSERS.get(plugin, RegistryParser)
    return factory(plugin, settings=settings, fetcher=fetcher,
                   stability=stability, feed_link=feed_link)


__all__ = [
    'BaseParser',
    'FeedParser',
    'FeedSource',
    'RegistryParser',
    'RevolutionSliderParser',
    'UberMenuParser',
    'PARSERS',
    'get_parser',
]
