"""CLI for reading reflection entries.

Usage:
    memkit reflections                    Latest entry in the repository
    memkit reflections 2025/06            Every entry for June 2025
    memkit reflections 2025 --latest      Latest entry of 2025
    memkit reflections 2025/06/01 --raw   One day, as raw markdown
    memkit reflections --list [DATE]      Entry paths only, no content
"""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys

import memkit.config
import memkit.errors
import memkit.reflections.config
import memkit.reflections.reader
import memkit.reflections.store

logger = logging.getLogger("memkit.reflections")


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``memkit reflections``."""
    parser = argparse.ArgumentParser(
        prog="memkit reflections",
        description="Fetch dated reflection entries from the diary repository.",
    )
    parser.add_argument("date", nargs="?", default="", help="YYYY, YYYY/MM or YYYY/MM/DD")
    latest = parser.add_mutually_exclusive_group()
    latest.add_argument(
        "--latest", dest="latest", action="store_true", default=None,
        help="Only the most recent entry (default when no date is given)",
    )
    latest.add_argument(
        "--all", dest="latest", action="store_false",
        help="Every entry under the date",
    )
    parser.add_argument("--raw", action="store_true", help="Raw markdown instead of a syntax tree")
    parser.add_argument("--list", action="store_true", help="List entry paths only")
    parser.add_argument("--path", type=pathlib.Path, default=None, help="Project root")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cfg = memkit.config.load("reflections", args.path)
    try:
        with memkit.reflections.store.GitHubStore.from_config(cfg) as store:
            reader = memkit.reflections.reader.ReflectionReader(store, cfg)
            if args.list:
                result = reader.list_entries(args.date)
            else:
                result = reader.get(args.date, args.latest, args.raw)
    except memkit.errors.MemkitError as exc:
        logger.debug("Reflection fetch failed", exc_info=True)
        print(f"Reflections failed: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
