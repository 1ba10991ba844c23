"""
Changelog block extractor.

A changelog is a run of headings, each followed by the elements that
describe that release. One block per heading; a block's body ends at the
next heading of the same kind.
"""

from ..models import ChangelogBlock


def wrap_node(node) -> str:
    """Re-serialize an element in its own block-level tag, without attributes."""
    return f"<{node.name}>{node.decode_contents()}</{node.name}>"


def split_blocks(container, heading: str = 'h4', after=None) -> list[ChangelogBlock]:
    """
    Segment a changelog element into blocks.

    Args:
        container: BeautifulSoup element holding the changelog
        heading: Tag name that starts a release
        after: Anchor element; when given, only headings that follow it
               in the document are used and container is ignored

    Returns:
        Blocks in document order
    """
    blocks = []
    if after is not None:
        nodes = after.find_all_next(heading)
    elif container is not None:
        nodes = container.find_all(heading)
    else:
        return blocks

    for node in nodes:
        blocks.append(ChangelogBlock(heading=node.get_text(' ', strip=True), body=block_body(node)))

    return blocks


def block_body(node) -> list[str]:
    """Elements following a heading, up to the next heading of the same name."""
    body = []
    for sibling in node.find_next_siblings():
        if sibling.name == node.name:
            break
        body.append(wrap_node(sibling))
    return body


def find_container(soup, selectors: list[str]):
    """First element matching one of the selectors, tried in order."""
    for selector in selectors:
        container = soup.select_one(selector)
        if container is not None:
            return container
    return None
