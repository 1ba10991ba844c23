#!/usr/bin/env python3
"""
Tests for tag / changelog reconciliation.

Run:
    python -m pytest tests/test_reconcile.py -v
"""

from datetime import datetime, timedelta, timezone

from plugin_feed.models import ChangelogBlock, Release, Tag, TagList
from plugin_feed.parsers.reconcile import build_link, order_releases, reconcile

T0 = datetime(2015, 1, 1, tzinfo=timezone.utc)
T1 = T0 + timedelta(days=30)
T2 = T1 + timedelta(days=30)


def make_tags():
    return TagList([
        Tag(name='1.2', revision=10, description='Tagging 1.2', created=T1),
        Tag(name='1.1', revision=9, description='Tagging 1.1', created=T0),
    ])


def test_changelog_blocks_matched_to_tags():
    """The canonical scenario: one matching block, two tags."""
    tags = {
        '1.2': Tag(revision=10, created=T1),
        '1.1': Tag(revision=9, created=T0),
    }
    blocks = [ChangelogBlock(heading='Plugin 1.2 (stable)', body=['<p>Fixed bug</p>'])]

    releases = reconcile(tags, blocks, 'plugin', 'Plugin')

    assert list(releases) == ['1.2'], "Only versions with a changelog block are released"
    release = releases['1.2']
    assert release.stability == 'stable'
    assert release.content == '<p>Fixed bug</p>'
    assert release.created == T1
    assert 'stop_rev=10' in release.link
    assert 'stop_rev=9' in release.link


def test_blocks_without_tag_are_dropped():
    """Unreleased changelog entries never become releases."""
    blocks = [
        ChangelogBlock(heading='1.3', body=['<p>Not yet</p>']),
        ChangelogBlock(heading='1.2', body=['<p>Fixed bug</p>']),
    ]

    releases = reconcile(make_tags(), blocks, 'demo', 'Demo')

    assert list(releases) == ['1.2']


def test_tags_only_when_nothing_matches():
    """No matching block: one release per tag from the commit message."""
    blocks = [ChangelogBlock(heading='Unreleased', body=['<p>Work in progress</p>'])]
    tags = TagList([
        Tag(name='2.0-beta2', revision=12, description='Second beta', created=T2),
        Tag(name='1.2', revision=10, description='Tagging 1.2', created=T1),
        Tag(name='1.1', revision=9, description='Tagging 1.1', created=T0),
    ])

    releases = reconcile(tags, blocks, 'demo', 'Demo')

    assert len(releases) == 3, f"Expected one release per tag, got {list(releases)}"
    assert releases['2.0-beta2'].stability == 'beta.2'
    assert releases['1.2'].stability == 'stable'
    for release in releases.values():
        assert release.content.startswith('Commit message: '), release.content
    assert releases['1.1'].content == 'Commit message: Tagging 1.1'


def test_link_chaining():
    """Newer release links the pair of revisions; the oldest only its own."""
    blocks = [
        ChangelogBlock(heading='1.2', body=['<p>b</p>']),
        ChangelogBlock(heading='1.1', body=['<p>a</p>']),
    ]

    releases = reconcile(make_tags(), blocks, 'demo', 'Demo')

    newer, oldest = releases['1.2'].link, releases['1.1'].link
    assert newer.startswith('https://plugins.trac.wordpress.org/log/demo/trunk?')
    assert 'stop_rev=10' in newer and 'stop_rev=9' in newer
    assert oldest.count('stop_rev=') == 1, f"Oldest link has a second bound: {oldest}"
    assert 'stop_rev=9' in oldest


def test_build_link_format():
    link = build_link('demo', Tag(name='1.2', revision=10), Tag(name='1.1', revision=9))

    assert link == ('https://plugins.trac.wordpress.org/log/demo/trunk'
                    '?action=stop_on_copy&mode=stop_on_copy&limit=100&stop_rev=10&stop_rev=9')


def test_versions_unique_and_newest_first():
    """Duplicate headings collapse into one release; order follows created."""
    blocks = [
        ChangelogBlock(heading='1.1', body=['<p>old text</p>']),
        ChangelogBlock(heading='1.2', body=['<p>b</p>']),
        ChangelogBlock(heading='1.1', body=['<p>new text</p>']),
    ]

    releases = reconcile(make_tags(), blocks, 'demo', 'Demo')

    assert list(releases) == ['1.2', '1.1']
    assert releases['1.1'].content == '<p>new text</p>', "Later block replaces the earlier one"
    dates = [r.created for r in releases.values()]
    assert dates == sorted(dates, reverse=True)


def test_empty_inputs():
    assert reconcile(TagList(), [], 'demo', 'Demo') == {}
    assert reconcile(TagList(), [ChangelogBlock(heading='1.0')], 'demo', 'Demo') == {}


def test_order_releases_stable_and_undated_last():
    releases = {
        'a': Release(title='A', version='a', created=T0),
        'b': Release(title='B', version='b', created=None),
        'c': Release(title='C', version='c', created=T1),
        'd': Release(title='D', version='d', created=T1),
    }

    ordered = order_releases(releases)

    assert list(ordered) == ['c', 'd', 'a', 'b']
