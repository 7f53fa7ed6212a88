"""Loading of profile and instruction units from TOML definitions.

One file per unit: ``<units_path>/<namespace>/<NAME>.toml``. A unit may
declare ``inherits = ["PARENT", ...]``; everything else is opaque body.
"""

from __future__ import annotations

import logging
import pathlib
import tomllib
from typing import Any

import memkit.builder.sorter
import memkit.errors

logger = logging.getLogger("memkit.builder.units")

NAMESPACES = ("profiles", "instructions")


class UnitLoader:
    def __init__(self, units_path: pathlib.Path, namespace: str) -> None:
        if namespace not in NAMESPACES:
            raise ValueError(f"Unknown unit namespace: {namespace}")
        self.directory = units_path / namespace
        self.namespace = namespace
        self._cache: dict[str, dict[str, Any] | None] = {}

    def load(self, name: str) -> dict[str, Any] | None:
        """Return the unit body for *name*, or ``None`` if undefined."""
        if name not in self._cache:
            path = self.directory / f"{name}.toml"
            if not path.is_file():
                self._cache[name] = None
            else:
                try:
                    self._cache[name] = tomllib.loads(path.read_text(encoding="utf-8"))
                except (
                    OSError, UnicodeDecodeError, tomllib.TOMLDecodeError
                ) as exc:
                    raise memkit.errors.ConfigError(
                        f"Invalid {self.namespace} unit {path}: {exc}", "ERR_UNIT_INVALID"
                    ) from exc
        return self._cache[name]

    def build(self, name: str) -> dict[str, dict[str, Any]]:
        """Collect *name* and every unit it transitively inherits from.

        Parents without a definition are logged and skipped. The mapping is
        in discovery order; ordering for output is the sorter's job.
        """
        root = self.load(name)
        if root is None:
            raise memkit.errors.ConfigError(
                f"Unknown {self.namespace} unit: {name} (looked in {self.directory})",
                "ERR_UNIT_NOT_FOUND",
            )
        units: dict[str, dict[str, Any]] = {}
        # Each entry is (unit, the unit that declared it as a parent)
        pending: list[tuple[str, str | None]] = [(name, None)]
        while pending:
            current, child = pending.pop(0)
            if current in units:
                continue
            body = self.load(current)
            if body is None:
                logger.warning(
                    "%s unit %s inherits undefined %s", self.namespace, child, current
                )
                continue
            units[current] = body
            pending.extend((parent, current) for parent in memkit.builder.sorter.parents(body))
        return units
