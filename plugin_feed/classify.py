"""
Version and stability classification for release titles.

Pure functions shared by every parser variant.
"""

import re
from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as date_parser

# Checked in this order; a later match overwrites an earlier one, so
# "beta 2, rc 1" ends up as "rc.1" even though beta appears first.
STABILITY_PATTERNS = [
    ('alpha', re.compile(r'(alpha)(\s*\d+)?', re.IGNORECASE)),
    ('beta', re.compile(r'(beta)(\s*\d+)?', re.IGNORECASE)),
    ('rc', re.compile(r'(rc|release\s+candidate)(\s*\d+)?', re.IGNORECASE)),
]

_VERSION_PREFIX = re.compile(r'^v(er)?(sion\s*)?', re.IGNORECASE)
_VERSION_NUMBER = re.compile(r'\d[\d.]*')


def parse_version(text: Optional[str], title: Optional[str] = None) -> Optional[str]:
    """
    Extract a version number from a release title.

    "Gravity Forms v2.4.1 Released" -> "2.4.1" (with title="Gravity Forms")

    Returns None if the text has no digits.
    """
    if not text:
        return None

    text = text.strip()
    if title:
        text = re.sub(r'^' + re.escape(title) + r'\s+', '', text, flags=re.IGNORECASE)
    text = _VERSION_PREFIX.sub('', text.strip())

    match = _VERSION_NUMBER.search(text)
    if not match:
        return None
    return match.group(0).rstrip('.')


def parse_stability(text: Optional[str]) -> str:
    """
    Classify a release title as stable, alpha, beta or rc.

    A numeric qualifier is appended: "2.0 beta 3" -> "beta.3".
    """
    stability = 'stable'
    if not text:
        return stability

    for name, pattern in STABILITY_PATTERNS:
        match = pattern.search(text)
        if match:
            stability = name
            if match.group(2):
                stability += '.' + match.group(2).strip()

    return stability


def parse_date(text: Optional[str]) -> Optional[datetime]:
    """
    Parse a free-form date into an aware datetime.

    Naive values are taken as UTC. Returns None if parsing fails.
    """
    if not text:
        return None

    text = text.strip()
    # dateutil trips over ordinals like "15th July 2015"
    text = re.sub(r'(\d)(st|nd|rd|th)\b', r'\1', text)

    try:
        dt = date_parser.parse(text, fuzzy=True)
    except (ValueError, OverflowError):
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
