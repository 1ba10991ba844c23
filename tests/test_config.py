#!/usr/bin/env python3
"""
Tests for settings loading and validation.

Run:
    python -m pytest tests/test_config.py -v
"""

from pathlib import Path

import pytest

from plugin_feed.config import Settings, build_stability_filter
from plugin_feed.exceptions import ConfigException


def test_defaults():
    settings = Settings.from_env(env={})

    assert settings.output_limit == 25
    assert settings.stability == 'any'
    assert settings.stability_filter is None
    assert settings.output_format == 'atom'
    assert settings.cache_ttl == 3600
    assert settings.http_timeout == 30.0
    assert settings.http_retries == 2


def test_values_from_env():
    settings = Settings.from_env(env={
        'OUTPUT_LIMIT': '0',
        'RELEASE_STABILITY': 'stable,rc',
        'OUTPUT_FORMAT': 'RSS',
        'CACHE_DIR': '/tmp/feeds',
        'CACHE_TTL': '60',
    })

    assert settings.output_limit == 0
    assert settings.output_format == 'rss'
    assert settings.cache_dir == Path('/tmp/feeds')
    assert settings.cache_ttl == 60
    assert settings.stability_filter.search('rc.1')
    assert not settings.stability_filter.search('beta.2')


@pytest.mark.parametrize('env', [
    {'OUTPUT_LIMIT': 'many'},
    {'OUTPUT_LIMIT': '-1'},
    {'OUTPUT_FORMAT': 'json'},
    {'RELEASE_STABILITY': 'nightly'},
    {'HTTP_TIMEOUT': 'soon'},
])
def test_invalid_values(env):
    """Bad configuration is reported before any scraping starts."""
    with pytest.raises(ConfigException) as excinfo:
        Settings.from_env(env=env)
    assert excinfo.value.config_key in env


def test_env_file_does_not_override_environment(tmp_path, monkeypatch):
    env_file = tmp_path / '.env'
    env_file.write_text('OUTPUT_LIMIT=5\nOUTPUT_FORMAT=rss\n', encoding='utf-8')
    monkeypatch.setenv('OUTPUT_LIMIT', '7')
    monkeypatch.delenv('OUTPUT_FORMAT', raising=False)

    settings = Settings.from_env(env_file=str(env_file))

    assert settings.output_limit == 7, "Process environment wins over .env"
    assert settings.output_format == 'rss'


def test_with_overrides():
    base = Settings()

    assert base.with_overrides(output_limit=None) is base
    changed = base.with_overrides(stability='beta', output_limit=3)
    assert changed.output_limit == 3
    assert changed.stability_filter.search('beta.1')
    assert base.stability_filter is None, "Original settings are untouched"

    with pytest.raises(ConfigException):
        base.with_overrides(output_format='pdf')


def test_build_stability_filter():
    assert build_stability_filter(None) is None
    assert build_stability_filter('any') is None
    assert build_stability_filter(' , ') is None
    assert build_stability_filter('stable, beta').pattern == '(stable|beta)'
