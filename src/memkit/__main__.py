"""memkit CLI: memory builder and reflection reader.

Usage:
    memkit build [opts]        Build profiles/instructions (see: memkit build -h)
    memkit load                Session-start build of the configured profile
    memkit reflections [opts]  Fetch reflection entries (see: memkit reflections -h)
    memkit config <cmd>        Layered configuration (get/set/list/show/env)
"""

from __future__ import annotations

import sys


def _cmd_build(args: list[str]) -> int:
    import memkit.builder.__main__

    return memkit.builder.__main__.main(args)


def _cmd_load(args: list[str]) -> int:
    import memkit.builder.__main__

    return memkit.builder.__main__.load_main(args)


def _cmd_reflections(args: list[str]) -> int:
    import memkit.reflections.__main__

    return memkit.reflections.__main__.main(args)


def _cmd_config(args: list[str]) -> int:
    import memkit.config_cli

    return memkit.config_cli.main(args)


_COMMANDS = {
    "build": _cmd_build,
    "load": _cmd_load,
    "reflections": _cmd_reflections,
    "config": _cmd_config,
}


def main() -> None:
    args = sys.argv[1:]
    handler = _COMMANDS.get(args[0]) if args else None
    if handler is None:
        print(__doc__)
        sys.exit(1)
    sys.exit(handler(args[1:]))


if __name__ == "__main__":
    main()
