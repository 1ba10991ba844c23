"""
plugin_feed - Release feeds for WordPress plugins.

Scrapes a plugin's changelog and Subversion tags (or a vendor page for
plugins sold elsewhere) and renders the releases as Atom or RSS.
"""

from .config import Settings
from .exceptions import (
    ConfigException,
    FetchException,
    ParseException,
    ParserDiagnostic,
    PluginFeedException,
)
from .generator import generate
from .models import ChangelogBlock, Release, Tag, TagList
from .parsers import PARSERS, get_parser

__version__ = '1.0.0'

__all__ = [
    'Settings',
    'PluginFeedException',
    'FetchException',
    'ParseException',
    'ConfigException',
    'ParserDiagnostic',
    'generate',
    'Tag',
    'TagList',
    'ChangelogBlock',
    'Release',
    'PARSERS',
    'get_parser',
]
