"""
UberMenu parser.

UberMenu is sold on CodeCanyon; its item page carries a plain-text
release log inside a <pre> right after the changelog anchor:

    v3.2.1 June 1, 2015
    * Fixed submenu positioning
    ==========================
    v3.2 May 4, 2015
    ...
"""

import logging
import re

from bs4 import BeautifulSoup

from ...classify import parse_date, parse_stability, parse_version
from ...exceptions import ParseException
from ...models import Release
from ..base import BaseParser

logger = logging.getLogger(__name__)

CHANGELOG_ANCHOR = 'item-description__changelog'

BLOCK_SEPARATOR = re.compile(r'[-=]{10,}')
BLOCK_HEADER = re.compile(r'v([\d.]+)\s+(.+)', re.IGNORECASE)


class UberMenuParser(BaseParser):
    """Parser for the UberMenu release log on CodeCanyon."""

    title = 'UberMenu'
    description = (
        'UberMenu is a user-friendly, highly customizable, responsive Mega Menu '
        'WordPress plugin. It works out of the box with the WordPress 3 Menu '
        'System, making it simple to get started but powerful enough to create '
        'highly customized and creative mega menu configurations.'
    )
    image = {
        'uri': 'https://thumb-cc.s3.envato.com/files/100231922/ubermenu-3.0.thumb.jpg',
        'height': 80,
        'width': 80,
    }
    link = 'https://codecanyon.net/item/ubermenu-wordpress-mega-menu-plugin/154703'

    sources = {
        'changelog': 'https://codecanyon.net/item/ubermenu-wordpress-mega-menu-plugin/154703',
    }

    def load_releases(self) -> None:
        body = self.fetch('changelog')
        if not body:
            logger.warning(f"⚠️ {self.plugin}: item page unavailable")
            return

        try:
            log = self.release_log(BeautifulSoup(body, 'html.parser'))
        except ParseException as e:
            logger.warning(f"⚠️ {e}")
            return

        link = f"{self.source_url('changelog')}#{CHANGELOG_ANCHOR}"

        for block in BLOCK_SEPARATOR.split(log):
            lines = block.strip().split("\n")
            match = BLOCK_HEADER.search(lines[0])
            if not match:
                # title must have version and pubdate
                continue

            version = parse_version(match.group(1))
            self.add_release(Release(
                title=f"{self.title} {version}",
                version=version,
                stability=parse_stability(match.group(1)),
                created=parse_date(match.group(2)),
                content="<br />\n".join(line.rstrip() for line in lines[1:]),
                link=link,
            ))

    def release_log(self, soup) -> str:
        """Text of the first <pre> after the changelog anchor."""
        anchor = soup.find(id=CHANGELOG_ANCHOR)
        if anchor is None:
            raise ParseException("changelog anchor not found", plugin=self.plugin,
                                 selector=f"#{CHANGELOG_ANCHOR}")

        pre = anchor.find_next_sibling('pre') or anchor.find_next('pre')
        if pre is None:
            raise ParseException("release log not found", plugin=self.plugin,
                                 selector=f"#{CHANGELOG_ANCHOR} ~ pre")
        return pre.get_text()
