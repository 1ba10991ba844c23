"""
Tag / changelog reconciliation.

Merges the Subversion tag list with the changelog blocks of a plugin into
releases keyed by version:

1. Each changelog block whose version is a known tag becomes a release;
   date and description come from the tag, stability and content from
   the block. Blocks without a matching tag are dropped.
2. If no block matched, every tag becomes a release on its own
   ("Commit message: ..." content).
3. Every release gets a Trac log link covering the commits between its
   tag and the previous (older) tag.
"""

import logging
from typing import Mapping, Union

from ..classify import parse_stability, parse_version
from ..models import ChangelogBlock, Release, Tag, TagList

logger = logging.getLogger(__name__)

TRAC_LOG_URL = (
    'https://plugins.trac.wordpress.org/log/{plugin}/trunk'
    '?action=stop_on_copy&mode=stop_on_copy&limit=100'
)


def build_link(plugin: str, tag: Tag, previous: Tag = None) -> str:
    """Trac log of the commits from `previous` (exclusive) up to `tag`."""
    link = TRAC_LOG_URL.format(plugin=plugin) + f'&stop_rev={tag.revision}'
    if previous is not None:
        link += f'&stop_rev={previous.revision}'
    return link


def releases_from_changelog(tags: TagList, blocks: list[ChangelogBlock], title: str) -> dict[str, Release]:
    """Step 1: one release per changelog block with a matching tag."""
    releases: dict[str, Release] = {}

    for block in blocks:
        version = parse_version(block.heading, title)
        if not version:
            logger.debug(f"Skipping changelog block without version: {block.heading!r}")
            continue

        tag = tags.get(version)
        if tag is None:
            logger.debug(f"Skipping changelog block {version}: no such tag")
            continue

        releases[version] = Release(
            title=f"{title} {version}",
            version=version,
            description=tag.description,
            stability=parse_stability(block.heading),
            created=tag.created,
            content=block.content or tag.description,
        )

    return releases


def releases_from_tags(tags: TagList, title: str) -> dict[str, Release]:
    """Step 2: without a usable changelog, every tag is a release."""
    releases: dict[str, Release] = {}

    for tag in tags:
        releases[tag.name] = Release(
            title=f"{title} {tag.name}",
            version=tag.name,
            description=tag.description,
            stability=parse_stability(tag.name),
            created=tag.created,
            content="Commit message: " + tag.description,
        )

    return releases


def reconcile(tags: Union[TagList, Mapping[str, Tag]], blocks: list[ChangelogBlock],
              plugin: str, title: str) -> dict[str, Release]:
    """
    Merge tags and changelog blocks into releases.

    Args:
        tags: Tags newest first (a TagList or a version -> Tag mapping)
        blocks: Changelog blocks in document order
        plugin: Plugin slug, used for links
        title: Plugin display title

    Returns:
        Releases keyed by version, newest first
    """
    if not isinstance(tags, TagList):
        tags = TagList.from_mapping(tags)

    releases = releases_from_changelog(tags, blocks, title)
    if not releases:
        if blocks:
            logger.info(f"{plugin}: no changelog entry matches a tag, using {len(tags)} tags")
        releases = releases_from_tags(tags, title)

    for version, release in releases.items():
        tag = tags.get(version)
        release.link = build_link(plugin, tag, tags.previous(version))

    return order_releases(releases)


def order_releases(releases: Mapping[str, Release]) -> dict[str, Release]:
    """
    Sort releases newest first by creation time.

    The sort is stable, so releases sharing a timestamp keep their
    source order; undated releases go last.
    """
    dated = [r for r in releases.values() if r.created is not None]
    undated = [r for r in releases.values() if r.created is None]
    ordered = sorted(dated, key=lambda r: r.created, reverse=True) + undated
    return {release.version: release for release in ordered}
