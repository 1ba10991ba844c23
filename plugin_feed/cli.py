#!/usr/bin/env python3
"""
Command line entry point.

Usage:
    plugin-feed akismet                       # Atom feed on stdout
    plugin-feed akismet --format rss -o akismet.xml
    plugin-feed jetpack --stability beta,rc --limit 10
    plugin-feed --list                        # plugins with a dedicated parser
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import OUTPUT_FORMATS, Settings
from .exceptions import ConfigException
from .generator import generate
from .parsers import PARSERS, get_parser

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='plugin-feed',
                                     description='Generate a release feed for a WordPress plugin')
    parser.add_argument('plugin', nargs='?', help='Plugin slug (e.g. akismet)')
    parser.add_argument('-s', '--stability', help='Comma list of stability tags (stable,alpha,beta,rc) or "any"')
    parser.add_argument('-f', '--format', choices=OUTPUT_FORMATS, help='Output format')
    parser.add_argument('-l', '--limit', type=int, help='Maximum number of releases (0 = unlimited)')
    parser.add_argument('-o', '--output', type=Path, help='Write the feed to this file instead of stdout')
    parser.add_argument('--env-file', help='Path to a .env file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose logging')
    parser.add_argument('--list', action='store_true', help='List plugins with a dedicated parser and exit')
    return parser


def main(argv=None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S',
        stream=sys.stderr
    )

    if args.list:
        for name, factory in sorted(PARSERS.items()):
            kind = getattr(factory, 'func', factory).__name__
            print(f"{name:<16} {kind}")
        return 0

    if not args.plugin:
        parser.error("the following arguments are required: plugin")

    try:
        settings = Settings.from_env(env_file=args.env_file).with_overrides(
            output_format=args.format,
            output_limit=args.limit,
            stability=args.stability,
        )
    except ConfigException as e:
        logger.error(f"❌ Configuration error: {e}")
        return 2

    logger.info(f"🔍 Loading releases for {args.plugin}")
    with get_parser(args.plugin, settings=settings) as plugin_parser:
        if plugin_parser.error:
            diagnostic = plugin_parser.error
            logger.error(f"❌ {diagnostic.plugin}: {diagnostic.message} "
                         f"({diagnostic.file}:{diagnostic.line})")

        feed = generate(plugin_parser)

    if args.output:
        args.output.write_text(feed, encoding='utf-8')
        logger.info(f"✅ Feed written to {args.output}")
    else:
        sys.stdout.write(feed)

    return 0


if __name__ == '__main__':
    sys.exit(main())
