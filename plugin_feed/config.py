"""
Configuration settings for plugin feeds.

Values come from the process environment (and an optional .env file) and
are read once, when a parser is built.
"""

import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional, Pattern

from dotenv import dotenv_values

from .exceptions import ConfigException

# Base paths
WORKSPACE = Path.cwd()
DEFAULT_CACHE_DIR = WORKSPACE / "cache"

OUTPUT_FORMATS = ('atom', 'rss')

# Stability tags understood by the release filter
STABILITIES = ('stable', 'alpha', 'beta', 'rc')


def build_stability_filter(stability: Optional[str]) -> Optional[Pattern]:
    """
    Convert "stable,rc" into a regex over Release.stability.

    Returns None (no filter) for "any" or an empty value.
    """
    if not stability or stability.strip().lower() == 'any':
        return None
    tags = [re.escape(tag.strip()) for tag in stability.split(',') if tag.strip()]
    if not tags:
        return None
    return re.compile('(' + '|'.join(tags) + ')')


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    value = env.get(key)
    if value is None or str(value).strip() == "":
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ConfigException(f"{key} must be an integer, got {value!r}", config_key=key)
    if number < 0:
        raise ConfigException(f"{key} must not be negative, got {number}", config_key=key)
    return number


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    value = env.get(key)
    if value is None or str(value).strip() == "":
        return default
    try:
        return float(str(value).strip())
    except ValueError:
        raise ConfigException(f"{key} must be a number, got {value!r}", config_key=key)


@dataclass(frozen=True)
class Settings:
    """Everything a parser and the feed generator need to know."""
    output_limit: int = 25           # 0 = unlimited
    stability: str = 'any'           # comma list of stability tags or "any"
    output_format: str = 'atom'
    cache_dir: Path = DEFAULT_CACHE_DIR
    cache_ttl: int = 3600            # seconds
    http_timeout: float = 30.0       # seconds
    http_retries: int = 2            # attempts per request
    user_agent: str = 'Mozilla/5.0 (compatible; plugin-feed/1.0; +https://wordpress.org/plugins/)'

    stability_filter: Optional[Pattern] = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        fmt = (self.output_format or 'atom').lower()
        if fmt not in OUTPUT_FORMATS:
            raise ConfigException(f"Unknown output format: {self.output_format}", config_key='OUTPUT_FORMAT')
        if self.output_limit is None or self.output_limit < 0:
            raise ConfigException(f"Invalid output limit: {self.output_limit}", config_key='OUTPUT_LIMIT')
        unknown = [tag for tag in (self.stability or 'any').split(',')
                   if tag.strip() and tag.strip().lower() not in STABILITIES + ('any',)]
        if unknown:
            raise ConfigException(f"Unknown stability: {', '.join(unknown)}", config_key='RELEASE_STABILITY')
        object.__setattr__(self, 'output_format', fmt)
        object.__setattr__(self, 'stability_filter', build_stability_filter(self.stability))

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, env_file: Optional[str] = None) -> "Settings":
        """
        Load settings from environment variables.

        Args:
            env: Mapping to read instead of os.environ (tests)
            env_file: .env file path; values never override the real environment

        Returns:
            Validated Settings instance
        """
        if env is None:
            merged = {}
            path = Path(env_file) if env_file else WORKSPACE / ".env"
            if path.exists():
                merged.update({k: v for k, v in dotenv_values(path).items() if v is not None})
            merged.update(os.environ)
            env = merged

        return cls(
            output_limit=_int(env, 'OUTPUT_LIMIT', 25),
            stability=env.get('RELEASE_STABILITY') or 'any',
            output_format=env.get('OUTPUT_FORMAT') or 'atom',
            cache_dir=Path(env.get('CACHE_DIR') or DEFAULT_CACHE_DIR),
            cache_ttl=_int(env, 'CACHE_TTL', 3600),
            http_timeout=_float(env, 'HTTP_TIMEOUT', 30.0),
            http_retries=max(1, _int(env, 'HTTP_RETRIES', 2)),
        )

    def with_overrides(self, **overrides) -> "Settings":
        """Copy with per-request overrides; None values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self
