"""
Shared fixtures: canned pages served by a mocked requests session.

Tests never touch the network; every URL a parser asks for must be in
the `pages` mapping or it gets a 404.
"""

from unittest.mock import MagicMock

import pytest

from plugin_feed.cache import MemoryCache
from plugin_feed.config import Settings
from plugin_feed.fetcher import Fetcher

TAGS_URL = 'https://plugins.trac.wordpress.org/browser/{plugin}/tags?order=date&desc=1'
PROFILE_URL = 'https://wordpress.org/plugins/{plugin}/changelog/'


def make_response(status_code=200, text=''):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


def make_session(pages):
    """MagicMock session answering GETs from a url -> body mapping."""
    session = MagicMock()
    session.headers = {}

    def get(url, timeout=None):
        if url in pages:
            return make_response(200, pages[url])
        return make_response(404, 'Not Found')

    session.get.side_effect = get
    return session


def tag_row(name, revision, stamp, message):
    return f"""
    <tr class="even">
      <td class="name"><a class="dir" title="View Directory" href="/browser/demo/tags/{name}">{name}</a></td>
      <td class="size"></td>
      <td class="rev"><a title="View Revision Log" href="/log/demo/tags/{name}?rev={revision}">@{revision}</a><a title="View Changeset" class="chgset" href="/changeset/{revision}/"></a></td>
      <td class="age"><a class="timeline" href="/timeline?from={stamp}" title="See timeline at {stamp}">3 years</a></td>
      <td class="change"><span class="author">someone:</span> <span class="change">{message}</span></td>
    </tr>
    """


def tags_page(rows):
    """Trac browser listing of a tags directory, rows given newest first."""
    body = "".join(tag_row(*row) for row in rows)
    return f"""
    <html><body>
    <table class="listing dirlist" id="dirlist">
      <thead><tr><th class="name">Name</th><th class="size">Size</th><th class="rev">Rev</th><th>Age</th><th class="change">Last Change</th></tr></thead>
      <tbody>
        <tr class="even"><td class="name" colspan="5"><a class="parent" title="Parent Directory" href="/browser/demo">../</a></td></tr>
        {body}
      </tbody>
    </table>
    </body></html>
    """


def profile_page(title, description, changelog):
    """wordpress.org changelog tab of a plugin profile."""
    return f"""
    <html><head><meta name="description" content="Meta description of {title}"></head>
    <body>
      <header class="plugin-header"><h1 class="plugin-title">{title}</h1></header>
      <p class="shortdesc">{description}</p>
      <div class="block changelog">
        <div class="block-content">
          {changelog}
        </div>
      </div>
    </body></html>
    """


@pytest.fixture
def settings(tmp_path):
    return Settings(cache_dir=tmp_path / 'cache')


@pytest.fixture
def make_fetcher(settings):
    """Factory for a Fetcher backed by canned pages and a MemoryCache."""
    def factory(pages, fetcher_settings=None):
        fetcher_settings = fetcher_settings or settings
        return Fetcher(fetcher_settings, cache=MemoryCache(ttl=fetcher_settings.cache_ttl),
                       session=make_session(pages), retry_delay=0)
    return factory
