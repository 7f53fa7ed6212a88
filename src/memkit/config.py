"""Layered memkit configuration.

Subsystems declare their settings as dataclasses tagged with
``@configurable("<section>")``. ``load()`` builds an instance from the
dataclass defaults, then the user-wide file, then the project file; later
layers replace earlier ones key by key (tables are not deep-merged).

    ~/.config/memkit/config.toml     global
    <project>/.memkit/config.toml    local

The project root is the nearest ancestor holding ``.git``, else the cwd.
"""

from __future__ import annotations

import dataclasses
import logging
import pathlib
import tomllib
from typing import Any, TypeVar

import tomli_w

T = TypeVar("T")

logger = logging.getLogger("memkit.config")

_SECTIONS: dict[str, type] = {}

# Field annotations are strings under postponed evaluation
_SCALARS = {"int": int, "float": float, "bool": bool, "str": str}

_TRUTHY = ("true", "1", "yes")


def configurable(section: str):
    """Register the decorated dataclass as config section *section*."""

    def decorator(cls: type[T]) -> type[T]:
        _SECTIONS[section] = cls
        return cls

    return decorator


def list_sections() -> dict[str, type]:
    """Snapshot of ``{section: dataclass}`` for every registered section."""
    return dict(_SECTIONS)


def _section(section: str) -> type:
    try:
        return _SECTIONS[section]
    except KeyError:
        raise KeyError(f"Unknown config section: {section}") from None


# -- locations ---------------------------------------------------------------

def _global_path() -> pathlib.Path:
    return pathlib.Path.home() / ".config" / "memkit" / "config.toml"


def _local_path(root: pathlib.Path) -> pathlib.Path:
    return root / ".memkit" / "config.toml"


def _scope_path(scope: str, root: pathlib.Path | None) -> pathlib.Path:
    if scope == "global":
        return _global_path()
    return _local_path(find_root(root))


def find_repo_root(cwd: pathlib.Path) -> pathlib.Path | None:
    """Nearest directory at or above *cwd* that contains ``.git``."""
    for candidate in (cwd.resolve(), *cwd.resolve().parents):
        if (candidate / ".git").is_dir():
            return candidate
    return None


def find_root(root: pathlib.Path | None = None) -> pathlib.Path:
    """*root* if given, else the repository root, else the cwd."""
    if root is not None:
        return root
    cwd = pathlib.Path.cwd()
    return find_repo_root(cwd) or cwd


# -- TOML files --------------------------------------------------------------

def _load_toml(path: pathlib.Path) -> dict[str, Any]:
    """Parsed *path*; a missing or unreadable file counts as empty."""
    if not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return {}


def _write_toml(path: pathlib.Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomli_w.dumps(data), encoding="utf-8")


# -- CLI values --------------------------------------------------------------

def _coerce(value: str, target_type: type) -> Any:
    """Convert a command-line string to *target_type*."""
    if target_type is bool:
        return value.lower() in _TRUTHY
    if target_type in (int, float):
        return target_type(value)
    return value


def _field_type(cls: type, field_name: str) -> type | None:
    """Scalar type of *field_name*, or ``None`` for list and table fields."""
    by_name = {f.name: f for f in dataclasses.fields(cls)}
    if field_name not in by_name:
        raise KeyError(field_name)
    annotation = by_name[field_name].type
    if isinstance(annotation, str):
        return _SCALARS.get(annotation)
    return annotation if annotation in _SCALARS.values() else None


# -- public API --------------------------------------------------------------

def load(section: str, root: pathlib.Path | None = None) -> Any:
    """Instance of *section* with global then local overrides applied."""
    cls = _section(section)
    root = find_root(root)

    merged: dict[str, Any] = {}
    for path in (_global_path(), _local_path(root)):
        merged.update(_load_toml(path).get(section, {}))

    known = {f.name for f in dataclasses.fields(cls)}
    for key in sorted(set(merged) - known):
        logger.debug("Ignoring unknown key %s.%s", section, key)
    return cls(**{k: v for k, v in merged.items() if k in known})


def get_effective(section: str, key: str, root: pathlib.Path | None = None) -> Any:
    """Effective value of ``section.key`` after all layers."""
    return getattr(load(section, root), key)


def set_value(
    section: str,
    key: str,
    value: Any,
    *,
    scope: str = "local",
    root: pathlib.Path | None = None,
) -> None:
    """Persist ``section.key = value`` in the *scope* file.

    String values are coerced to the field's scalar type; list and table
    fields must be edited in the file directly.
    """
    cls = _section(section)
    if key not in {f.name for f in dataclasses.fields(cls)}:
        raise KeyError(f"Unknown key: {section}.{key}")

    if isinstance(value, str):
        target = _field_type(cls, key)
        if target is None:
            raise ValueError(
                f"{section}.{key} is a table or list; edit config.toml instead"
            )
        value = _coerce(value, target)

    path = _scope_path(scope, root)
    data = _load_toml(path)
    data.setdefault(section, {})[key] = value
    _write_toml(path, data)
    logger.debug("Set %s.%s in %s", section, key, path)


def reset_value(
    section: str,
    key: str,
    *,
    scope: str = "local",
    root: pathlib.Path | None = None,
) -> None:
    """Drop ``section.key`` from the *scope* file; empty sections go too."""
    path = _scope_path(scope, root)
    data = _load_toml(path)
    values = data.get(section)
    if not values or key not in values:
        return
    del values[key]
    if not values:
        del data[section]
    _write_toml(path, data)
