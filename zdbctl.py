#!/usr/bin/env python3
"""Command-line inspector for a 0-db namespace.

Usage:
    python zdbctl.py ping
    python zdbctl.py --address localhost:9900 set hello world
    python zdbctl.py scan --start a --end m --limit 20
    python zdbctl.py stats
"""

import argparse
import logging
import os
import sys

from zdb.adapter import ZDB
from zdb.config import ClientConfig
from zdb.models.exceptions import EndOfDataError, ZDBError

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "WARNING").upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger()


def build_parser() -> argparse.ArgumentParser:
    env = ClientConfig.from_env()

    parser = argparse.ArgumentParser(description="Inspect a 0-db namespace")
    parser.add_argument("--address", default=env.address, help="host:port of the server")
    parser.add_argument("--namespace", default=env.namespace, help="namespace to select")
    parser.add_argument("--password", default=env.password, help="namespace password")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("ping", help="check the server is reachable")

    get = sub.add_parser("get", help="print the value of a key")
    get.add_argument("key")

    set_ = sub.add_parser("set", help="store a value")
    set_.add_argument("key")
    set_.add_argument("value")

    delete = sub.add_parser("del", help="delete a key")
    delete.add_argument("key")

    scan = sub.add_parser("scan", help="list keys in [start, end)")
    scan.add_argument("--start", default=None, help="first key (inclusive)")
    scan.add_argument("--end", default=None, help="end key (exclusive)")
    scan.add_argument("--reverse", action="store_true", help="walk in descending order")
    scan.add_argument("--limit", type=int, default=0, help="stop after N keys (0 = no limit)")

    sub.add_parser("stats", help="print server INFO")
    return parser


def _encode(value: str | None) -> bytes | None:
    return None if value is None else value.encode("utf-8")


def _show(value: bytes) -> str:
    return value.decode("utf-8", errors="backslashreplace")


def run(args: argparse.Namespace) -> int:
    config = ClientConfig.from_address(
        args.address, namespace=args.namespace, password=args.password
    )

    with ZDB.connect(config) as db:
        if args.command == "ping":
            db.client.ping()
            print("PONG")

        elif args.command == "get":
            value = db.get(_encode(args.key))
            if value is None:
                print("(nil)")
            else:
                print(_show(value))

        elif args.command == "set":
            db.set(_encode(args.key), _encode(args.value))
            print("OK")

        elif args.command == "del":
            db.delete(_encode(args.key))
            print("OK")

        elif args.command == "scan":
            start, end = _encode(args.start), _encode(args.end)
            factory = db.reverse_iterator if args.reverse else db.iterator
            count = 0
            with factory(start, end) as it:
                while it.valid():
                    print(_show(it.key()))
                    count += 1
                    if args.limit and count >= args.limit:
                        break
                    it.next()

                err = it.error()
                if err is not None and not isinstance(err, EndOfDataError):
                    raise err

        elif args.command == "stats":
            stats = db.stats()
            if stats is None:
                print("stats unavailable", file=sys.stderr)
                return 1
            for key in sorted(stats):
                print(f"{key}: {stats[key]}")

    return 0


def main(argv: list[str] | None = None) -> int:
    try:
        return run(build_parser().parse_args(argv))
    except (ZDBError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
