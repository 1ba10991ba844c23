#!/usr/bin/env python3
"""
HTTP entry point.

    GET /{plugin}?stability=beta,rc&format=rss&limit=10

Parsers are synchronous, so each request builds its parser in the
default executor. All requests share one Fetcher (and so one cache).
"""

import argparse
import asyncio
import logging
import sys
from functools import partial
from typing import Optional

from aiohttp import web

from .config import Settings
from .exceptions import ConfigException
from .fetcher import Fetcher
from .generator import CONTENT_TYPES, generate
from .parsers import get_parser

logger = logging.getLogger(__name__)

SETTINGS_KEY = web.AppKey('settings', Settings)
FETCHER_KEY = web.AppKey('fetcher', Fetcher)


def request_settings(settings: Settings, query) -> Settings:
    """Apply query parameter overrides, raising ConfigException on bad values."""
    limit = query.get('limit')
    if limit is not None:
        try:
            limit = int(limit)
        except ValueError:
            raise ConfigException(f"limit must be an integer, got {limit!r}", config_key='limit')

    return settings.with_overrides(
        output_format=query.get('format') or None,
        output_limit=limit,
        stability=query.get('stability') or None,
    )


def _load(plugin: str, settings: Settings, fetcher: Fetcher, feed_link: str):
    parser = get_parser(plugin, settings=settings, fetcher=fetcher, feed_link=feed_link)
    if parser.error:
        return parser, None
    return parser, generate(parser)


async def feed_handler(request: web.Request) -> web.Response:
    plugin = request.match_info['plugin']

    try:
        settings = request_settings(request.app[SETTINGS_KEY], request.query)
    except ConfigException as e:
        logger.warning(f"⚠️ Bad request for {plugin}: {e}")
        raise web.HTTPBadRequest(text=str(e))

    loop = asyncio.get_running_loop()
    parser, feed = await loop.run_in_executor(
        None, partial(_load, plugin, settings, request.app[FETCHER_KEY], str(request.url))
    )

    if parser.error:
        return web.Response(status=500, text=parser.error.to_html(), content_type='text/html')

    return web.Response(text=feed, content_type=CONTENT_TYPES[settings.output_format], charset='utf-8')


async def close_fetcher(app: web.Application) -> None:
    app[FETCHER_KEY].close()


def create_app(settings: Optional[Settings] = None, fetcher: Optional[Fetcher] = None) -> web.Application:
    """Build the aiohttp application."""
    settings = settings or Settings.from_env()

    app = web.Application()
    app[SETTINGS_KEY] = settings
    app[FETCHER_KEY] = fetcher or Fetcher(settings)
    app.router.add_get(r'/{plugin:[A-Za-z0-9_-]+}', feed_handler)
    app.on_cleanup.append(close_fetcher)
    return app


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog='plugin-feed-server', description='Serve plugin release feeds over HTTP')
    parser.add_argument('--host', default='127.0.0.1', help='Interface to bind')
    parser.add_argument('--port', type=int, default=8080, help='Port to listen on')
    parser.add_argument('--env-file', help='Path to a .env file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S',
        stream=sys.stderr
    )

    try:
        settings = Settings.from_env(env_file=args.env_file)
    except ConfigException as e:
        logger.error(f"❌ Configuration error: {e}")
        return 2

    logger.info(f"🚀 Serving feeds on http://{args.host}:{args.port}/{{plugin}}")
    web.run_app(create_app(settings), host=args.host, port=args.port, print=None)
    return 0


if __name__ == '__main__':
    sys.exit(main())
