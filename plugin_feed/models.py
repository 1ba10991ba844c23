"""
Data models for plugin release feeds.

Tags come from the Subversion browser, changelog blocks from the
human-written changelog, releases are what ends up in the feed.
"""

import re
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Iterator, Mapping, Optional, Union

from bs4 import BeautifulSoup


@dataclass
class Tag:
    """
    One Subversion tag, i.e. one released version.

    The revision is only used to build commit-range links, never for ordering.
    """
    name: str = ""
    revision: Union[str, int, None] = None
    description: str = ""
    created: Optional[datetime] = None


@dataclass
class ChangelogBlock:
    """A changelog heading and the HTML fragments that follow it."""
    heading: str
    body: list[str] = field(default_factory=list)

    @property
    def content(self) -> str:
        return "\n".join(self.body)


@dataclass
class Release:
    """
    Standardized structure for a published release.

    All parser variants produce Release objects regardless of source type.
    """
    title: str
    version: str
    description: str = ""
    stability: str = "stable"
    created: Optional[datetime] = None
    content: str = ""
    link: str = ""

    _filtered: bool = field(default=False, init=False, repr=False, compare=False)

    # Elements that never belong in feed content
    UNSAFE_TAGS = ('script', 'style', 'iframe', 'object', 'embed')

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = asdict(self)
        data.pop('_filtered', None)
        return data

    def filter(self) -> "Release":
        """
        Sanitize content for feed output.

        Runs once per release; later calls are no-ops.
        """
        if self._filtered:
            return self

        content = self.content or ""
        if "<" in content:
            soup = BeautifulSoup(content, 'html.parser')
            for tag in soup(list(self.UNSAFE_TAGS)):
                tag.decompose()
            for tag in soup.find_all(True):
                for attr in [a for a in tag.attrs if a.lower().startswith('on')]:
                    del tag[attr]
            content = str(soup)

        # XML 1.0 forbids most control characters (TAB, LF, CR are fine)
        content = re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F]", "", content)
        content = re.sub(r"\n\s*\n+", "\n", content).strip()

        self.content = content or self.description or ""
        self._filtered = True
        return self


class TagList:
    """
    Tags in source-listing order (newest first) with lookup by version.

    The previous (older) release of a version is simply the next tag
    in the list.
    """

    def __init__(self, tags=()):
        self._tags: list[Tag] = []
        self._index: dict[str, int] = {}
        for tag in tags:
            self.append(tag)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Tag]) -> "TagList":
        """Build from a version -> Tag mapping, filling in missing names."""
        tags = cls()
        for name, tag in mapping.items():
            if not tag.name:
                tag.name = name
            tags.append(tag)
        return tags

    def append(self, tag: Tag) -> None:
        # First listing of a name wins; Trac never lists a tag twice
        if tag.name in self._index:
            return
        self._index[tag.name] = len(self._tags)
        self._tags.append(tag)

    def get(self, version: str) -> Optional[Tag]:
        index = self._index.get(version)
        return self._tags[index] if index is not None else None

    def previous(self, version: str) -> Optional[Tag]:
        """Tag released right before `version`, or None for the oldest one."""
        index = self._index.get(version)
        if index is None or index + 1 >= len(self._tags):
            return None
        return self._tags[index + 1]

    def names(self) -> list[str]:
        return [tag.name for tag in self._tags]

    def __contains__(self, version) -> bool:
        return version in self._index

    def __iter__(self) -> Iterator[Tag]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __bool__(self) -> bool:
        return bool(self._tags)
