"""
Slider Revolution parser.

The CodeCanyon item description has an "updates" banner image followed by
one h3 per release ("Version 5.0.4 (15th July 2015)") and the change list
of that release until the next h3.
"""

import logging
import re

from bs4 import BeautifulSoup

from ...classify import parse_date, parse_stability, parse_version
from ...exceptions import ParseException
from ...models import Release
from ..base import BaseParser
from ..changelog import split_blocks
from ..tags import clean_text

logger = logging.getLogger(__name__)

BANNER = re.compile(r'tpbanner_updates')
HEADING = re.compile(r'(.+) \((.+)\)')


class RevolutionSliderParser(BaseParser):
    """Parser for the Slider Revolution release log on CodeCanyon."""

    title = 'Slider Revolution'
    image = {
        'uri': 'https://0.s3.envato.com/files/104347001/smallicon2.png',
        'height': 80,
        'width': 80,
    }
    link = 'https://codecanyon.net/item/slider-revolution-responsive-wordpress-plugin/2751380'

    sources = {
        'profile': 'https://codecanyon.net/item/slider-revolution-responsive-wordpress-plugin/2751380',
    }

    def load_releases(self) -> None:
        body = self.fetch('profile')
        if not body:
            logger.warning(f"⚠️ {self.plugin}: item page unavailable")
            return

        soup = BeautifulSoup(body, 'html.parser')
        self.description = self.short_description(soup) or self.description

        try:
            banner = self.updates_banner(soup)
        except ParseException as e:
            logger.warning(f"⚠️ {e}")
            return

        for block in split_blocks(None, 'h3', after=banner):
            # title must have pubdate
            match = HEADING.match(block.heading)
            if not match:
                logger.debug(f"Skipping heading without date: {block.heading!r}")
                continue

            version = parse_version(match.group(1))
            self.add_release(Release(
                title=f"{self.title} {version}",
                version=version,
                stability=parse_stability(match.group(1)),
                created=parse_date(match.group(2)),
                content=block.content,
                link=self.source_url('profile'),
            ))

    def short_description(self, soup) -> str:
        """Text between the first description h3 and the next h4."""
        heading = soup.select_one('.item-description h3')
        if heading is None:
            return ""

        parts = []
        for sibling in heading.find_next_siblings():
            if sibling.name == 'h4':
                break
            parts.append(sibling.get_text(' ', strip=True))
        return clean_text(' '.join(parts))

    def updates_banner(self, soup):
        """Banner image that opens the release log."""
        banner = soup.find('img', src=BANNER)
        if banner is None:
            raise ParseException("updates banner not found", plugin=self.plugin,
                                 selector='img[src*=tpbanner_updates]')
        return banner
