#!/usr/bin/env python3
"""
Inspect and maintain a data cache database from the command line.

Usage:
    datacache-admin count
    datacache-admin keys
    datacache-admin get user:42
    datacache-admin set user:42 '{"name": "Ann"}' --ttl 3600
    datacache-admin remove user:42
    datacache-admin clear

Pass --db to work on a file other than the configured CACHE_DB_PATH.
"""

import sys
import argparse
import logging
from typing import List, Optional

from dotenv import load_dotenv

from datacache.caching.data_cache import DataCache
from datacache.config import CacheConfig, Settings
from datacache.services.database_service import DatabaseService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inspect and maintain the expiring data cache"
    )
    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Path to the cache database (default: CACHE_DB_PATH setting)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("count", help="Print the number of stored entries")
    subparsers.add_parser("keys", help="Print every stored key")

    get_parser = subparsers.add_parser("get", help="Print fresh content for a key")
    get_parser.add_argument("key")

    set_parser = subparsers.add_parser("set", help="Store content under a key")
    set_parser.add_argument("key")
    set_parser.add_argument("content")
    set_parser.add_argument(
        "--ttl",
        type=float,
        default=None,
        help="Time to live in seconds (default: one day)"
    )

    remove_parser = subparsers.add_parser("remove", help="Remove a key")
    remove_parser.add_argument("key")

    subparsers.add_parser("clear", help="Remove every entry")

    return parser


def run(cache: DataCache, args: argparse.Namespace) -> int:
    """Execute one parsed command against the cache and return the exit code"""
    if args.command == "count":
        print(cache.count())
    elif args.command == "keys":
        for key in cache.all_keys():
            print(key)
    elif args.command == "get":
        content = cache.lookup(args.key)
        if content is None:
            logger.warning(f"No fresh entry for '{args.key}'")
            return 1
        print(content)
    elif args.command == "set":
        cache.save(args.key, args.content, ttl_seconds=args.ttl)
    elif args.command == "remove":
        return 0 if cache.remove(args.key) else 1
    elif args.command == "clear":
        cache.clear_all()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    settings = Settings()
    db_path = args.db or settings.cache_db_path
    database = DatabaseService(db_path, echo=settings.database_echo)
    cache = DataCache(database, CacheConfig.from_settings(settings))

    try:
        return run(cache, args)
    finally:
        database.disconnect()


if __name__ == "__main__":
    sys.exit(main())
