"""CLI for the memory builder.

Usage:
    memkit build                   Emit the default profile's timestamp envelope
    memkit build -p NAME           Build a non-default profile and inject it locally
    memkit build -c [-p NAME]      Build the container bootstrap packages
    memkit load                    Session-start build of the configured profile
"""

from __future__ import annotations

import argparse
import logging
import pathlib

import memkit
import memkit.builder.config
import memkit.builder.environment
import memkit.builder.memory


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``memkit build``."""
    parser = argparse.ArgumentParser(
        prog="memkit build",
        description=f"Memory builder v{memkit.__version__}",
    )
    parser.add_argument(
        "-c", "--container", action="store_true",
        help="Use container environment (default: autodetected)",
    )
    parser.add_argument(
        "-p", "--profile", default=None,
        help="Build a specific profile (default: configured profile)",
    )
    parser.add_argument(
        "--path", type=pathlib.Path, default=None,
        help="Project root (default: repository root or cwd)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = memkit.builder.config.load_settings(args.path)

    # The default profile is only rebuilt for container targets
    profile = args.profile or settings.profile
    if not (args.container or profile != settings.profile):
        profile = None
    builder = memkit.builder.memory.MemoryBuilder(profile, settings, args.container)
    return 0 if builder.build() else 1


def load_main(argv: list[str] | None = None) -> int:
    """Entry point for ``memkit load`` (run automatically at session start).

    Inside the container only the timestamp envelope is emitted; elsewhere
    the configured profile is built and injected.
    """
    parser = argparse.ArgumentParser(prog="memkit load")
    parser.add_argument("--path", type=pathlib.Path, default=None)
    args = parser.parse_args(argv)

    settings = memkit.builder.config.load_settings(args.path)
    if memkit.builder.environment.is_container(settings):
        memkit.builder.memory.MemoryBuilder(None, settings, in_container=True).build()
        return 0
    builder = memkit.builder.memory.MemoryBuilder(
        settings.profile, settings, in_container=False
    )
    return 0 if builder.build() else 1


if __name__ == "__main__":
    raise SystemExit(main())
