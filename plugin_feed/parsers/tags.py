"""
Subversion tag extractor.

Reads the Trac repository browser listing of a plugin's tags directory:

<table id="dirlist">
  <tr>
    <td class="name"><a class="dir" href="...">1.2</a></td>
    <td class="rev"><a href="...">1234567</a><a class="chgset" href="..."></a></td>
    <td class="age"><a class="timeline" title="See timeline at 2015-03-01T10:00:00Z">2 years</a></td>
    <td class="change"><span class="author">someone:</span> <span class="change">Tagging 1.2</span></td>
  </tr>
</table>
"""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup

from ..classify import parse_date
from ..models import Tag, TagList

logger = logging.getLogger(__name__)


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text).strip()


def parse_tags(html: Optional[str]) -> TagList:
    """
    Parse a Trac tag listing into tags, newest first.

    Rows that are not directories, or carry no usable name or timestamp,
    are skipped.
    """
    tags = TagList()
    if not html:
        return tags

    soup = BeautifulSoup(html, 'html.parser')
    for row in soup.select('#dirlist tr'):
        tag = _parse_row(row)
        if tag:
            tags.append(tag)

    return tags


def _parse_row(row) -> Optional[Tag]:
    """Parse a single <tr> of the listing."""
    # parent directory link and file rows have no a.dir
    if row.select_one('a.dir') is None:
        return None

    name_el = row.select_one('.name')
    name = clean_text(name_el.get_text()) if name_el else ""
    name = re.sub(r'^v', '', name)
    if not name:
        return None

    # created datetime comes from the tooltip of the "age" link
    timeline = row.select_one('a.timeline')
    stamp = timeline.get('title', '') if timeline else ''
    stamp = re.sub(r'See timeline at', '', stamp).strip()
    created = parse_date(stamp)
    if created is None:
        logger.debug(f"Skipping tag {name}: unparseable time {stamp!r}")
        return None

    rev_el = row.select_one('.rev a')
    # the commit message span sits inside a cell that also names the author
    change_el = row.select_one('span.change') or row.select_one('.change')

    return Tag(
        name=name,
        revision=clean_text(rev_el.get_text()).lstrip('@') if rev_el else None,
        description=clean_text(change_el.get_text()) if change_el else "",
        created=created,
    )
