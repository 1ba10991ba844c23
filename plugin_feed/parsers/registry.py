"""
WordPress.org registry parser.

Default strategy: the changelog tab of the plugin profile gives the
release notes, the Trac browser of the tags directory gives dates,
revisions and the list of versions that really shipped.
"""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup

from .base import BaseParser
from .changelog import find_container, split_blocks
from .reconcile import reconcile
from .tags import clean_text, parse_tags

logger = logging.getLogger(__name__)

# Tried in order; the profile markup has changed over the years
TITLE_SELECTORS = ['#plugin-title h2', 'h1.plugin-title', '.plugin-title']
DESCRIPTION_SELECTORS = ['.shortdesc', '.plugin-description p']
CHANGELOG_SELECTORS = [
    '.block.changelog .block-content',
    '#tab-changelog',
    '.plugin-changelog',
    '#changelog',
]


def clean_title(title: str) -> str:
    """Drop subtitles: "Foo: the best" / "Foo - the best" / "Foo | x" / "Foo (beta)"."""
    title = re.sub(r'\s*(:|\s+-|\|)(.+)', '', title)
    title = re.sub(r'\s+\((.+)\)$', '', title)
    return title.strip()


def _first_text(soup, selectors: list[str]) -> Optional[str]:
    for selector in selectors:
        el = soup.select_one(selector)
        if el is not None:
            text = clean_text(el.get_text())
            if text:
                return text
    return None


class RegistryParser(BaseParser):
    """
    Parser for plugins hosted on wordpress.org.

    Changelog structure (changelog tab of the profile):
    <div class="block changelog"><div class="block-content">
      <h4>1.2</h4>
      <ul><li>Fixed bug</li></ul>
      <h4>1.1</h4>
      ...
    </div></div>
    """

    sources = {
        'profile': 'https://wordpress.org/plugins/{plugin}/changelog/',
        'tags': 'https://plugins.trac.wordpress.org/browser/{plugin}/tags?order=date&desc=1',
    }

    def load_releases(self) -> None:
        # tags need to be loaded before parsing releases
        self.tags = parse_tags(self.fetch('tags'))
        if not self.tags:
            logger.warning(f"⚠️ {self.plugin}: no tags found in repository browser")

        blocks = []
        profile = self.fetch('profile')
        if profile:
            soup = BeautifulSoup(profile, 'html.parser')
            self.title = clean_title(_first_text(soup, TITLE_SELECTORS) or self.title)
            self.description = _first_text(soup, DESCRIPTION_SELECTORS) or self._meta_description(soup)

            blocks = split_blocks(find_container(soup, CHANGELOG_SELECTORS), 'h4')
        else:
            logger.warning(f"⚠️ {self.plugin}: profile page unavailable")

        logger.debug(f"{self.plugin}: {len(self.tags)} tags, {len(blocks)} changelog blocks")

        for release in reconcile(self.tags, blocks, self.plugin, self.title).values():
            self.add_release(release)

    def _meta_description(self, soup) -> str:
        meta = soup.select_one('meta[name="description"]')
        return clean_text(meta.get('content')) if meta else self.description
