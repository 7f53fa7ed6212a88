"""CLI for memkit configuration.

Usage:
    memkit config list                         Show all sections with defaults
    memkit config get <section.key>            Print effective value
    memkit config set [--global] <key> <value> Write a scalar config value
    memkit config reset [--global] <key>       Remove an override
    memkit config show                         Dump full effective config
    memkit config env                          Show resolved builder settings
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path

import memkit.builder.config
import memkit.config
import memkit.reflections.config  # noqa: F401  (registers "reflections")


def _split_key(key: str) -> tuple[str, str] | None:
    section, sep, field = key.partition(".")
    if not sep or not section or not field:
        print(f"Invalid key format: {key!r} (expected section.key)", file=sys.stderr)
        return None
    return section, field


def _default(f: dataclasses.Field) -> object:
    if f.default_factory is not dataclasses.MISSING:
        return f.default_factory()
    return f.default


def cmd_list() -> int:
    """Print all registered sections with their fields."""
    for name, cls in sorted(memkit.config.list_sections().items()):
        print(f"[{name}]")
        for f in dataclasses.fields(cls):
            type_name = f.type if isinstance(f.type, str) else f.type.__name__
            print(f"  {f.name}: {type_name} = {_default(f)!r}")
        print()
    return 0


def cmd_get(key: str, root: Path | None) -> int:
    """Print the effective value for section.key."""
    parts = _split_key(key)
    if parts is None:
        return 1
    try:
        value = memkit.config.get_effective(*parts, root)
    except (KeyError, AttributeError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(value)
    return 0


def cmd_set(key: str, value: str, *, global_flag: bool, root: Path | None) -> int:
    """Set a config value in the TOML file."""
    parts = _split_key(key)
    if parts is None:
        return 1
    scope = "global" if global_flag else "local"
    try:
        memkit.config.set_value(*parts, value, scope=scope, root=root)
    except (KeyError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(f"Set {key} = {value} ({scope})")
    return 0


def cmd_reset(key: str, *, global_flag: bool, root: Path | None) -> int:
    """Remove a config override."""
    parts = _split_key(key)
    if parts is None:
        return 1
    scope = "global" if global_flag else "local"
    memkit.config.reset_value(*parts, scope=scope, root=root)
    print(f"Reset {key} ({scope})")
    return 0


def cmd_show(root: Path | None) -> int:
    """Dump the full effective config."""
    for name in sorted(memkit.config.list_sections()):
        instance = memkit.config.load(name, root)
        print(f"[{name}]")
        for f in dataclasses.fields(instance):
            print(f"  {f.name} = {getattr(instance, f.name)!r}")
        print()
    return 0


def cmd_env(root: Path | None) -> int:
    """Print builder settings after ``MEMKIT_*`` overrides are applied."""
    settings = memkit.builder.config.load_settings(root)
    for f in dataclasses.fields(settings):
        if f.name == "registry":
            continue
        print(f"{f.name} = {getattr(settings, f.name)}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for ``memkit config``."""
    parser = argparse.ArgumentParser(
        prog="memkit config",
        description="Layered memkit configuration (defaults, global, local).",
    )
    parser.add_argument("--path", type=Path, default=None, help="Project root")
    sub = parser.add_subparsers(dest="subcmd")

    sub.add_parser("list", help="Show all sections with defaults")
    sub.add_parser("show", help="Dump full effective config")
    sub.add_parser("env", help="Show resolved builder settings")

    p_get = sub.add_parser("get", help="Print effective value")
    p_get.add_argument("key", help="section.key")

    for name, help_text in (("set", "Set a config value"), ("reset", "Remove an override")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("key", help="section.key")
        if name == "set":
            p.add_argument("value", help="New value")
        p.add_argument("--global", dest="global_flag", action="store_true")

    args = parser.parse_args(argv)

    if args.subcmd == "list":
        return cmd_list()
    if args.subcmd == "show":
        return cmd_show(args.path)
    if args.subcmd == "env":
        return cmd_env(args.path)
    if args.subcmd == "get":
        return cmd_get(args.key, args.path)
    if args.subcmd == "set":
        return cmd_set(args.key, args.value, global_flag=args.global_flag, root=args.path)
    if args.subcmd == "reset":
        return cmd_reset(args.key, global_flag=args.global_flag, root=args.path)
    parser.print_help()
    return 1
