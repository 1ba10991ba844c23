#!/usr/bin/env python3
"""
Tests for the changelog block extractor.

Run:
    python -m pytest tests/test_changelog.py -v
"""

from bs4 import BeautifulSoup

from plugin_feed.parsers.changelog import find_container, split_blocks

CHANGELOG = """
<div class="block changelog">
  <div class="block-content">
    <h4>1.2</h4>
    <ul class="fixes"><li>Fixed bug</li></ul>
    <p>Thanks to everyone.</p>
    <h4>1.1</h4>
    <ul><li>New <strong>feature</strong></li></ul>
    <h4>1.0</h4>
  </div>
</div>
"""


def test_split_blocks_by_heading():
    """One block per h4, body up to the next h4."""
    soup = BeautifulSoup(CHANGELOG, 'html.parser')
    blocks = split_blocks(find_container(soup, ['.block.changelog .block-content']), 'h4')

    assert [b.heading for b in blocks] == ['1.2', '1.1', '1.0']
    assert blocks[0].body == ['<ul><li>Fixed bug</li></ul>', '<p>Thanks to everyone.</p>'], \
        "Attributes are dropped, each element keeps its own tag"
    assert blocks[1].content == '<ul><li>New <strong>feature</strong></li></ul>'
    assert blocks[2].body == [], "Last heading without details has an empty body"


def test_split_blocks_without_container():
    assert split_blocks(None) == []


def test_find_container_fallback_order():
    """Selectors are tried in order; the first match wins."""
    soup = BeautifulSoup('<div id="tab-changelog"><h4>1.0</h4></div>', 'html.parser')

    container = find_container(soup, ['.block.changelog .block-content', '#tab-changelog'])

    assert container is not None
    assert container.get('id') == 'tab-changelog'
    assert find_container(soup, ['.missing']) is None


def test_split_blocks_after_anchor():
    """With an anchor, only headings after it are used."""
    soup = BeautifulSoup(
        '<h3>Intro</h3><p>About</p><img src="banner.png"/>'
        '<h3>Version 2 (1 May 2015)</h3><p>Two</p>',
        'html.parser',
    )

    blocks = split_blocks(None, 'h3', after=soup.find('img'))

    assert [b.heading for b in blocks] == ['Version 2 (1 May 2015)']
    assert blocks[0].content == '<p>Two</p>'
