"""Configuration for the memory builder.

``BuilderConfig`` is the TOML-backed section; ``resolve_settings`` turns it
into an immutable :class:`Settings` once per run, applying environment
overrides and anchoring relative paths on an explicit base path.
"""

from __future__ import annotations

import dataclasses
import os
import pathlib
from collections.abc import Mapping
from typing import Any

import memkit.builder.registry
import memkit.config

ENV_PREFIX = "MEMKIT_"


def _default_plugins() -> dict[str, list[dict[str, Any]]]:
    return {
        "framework": [
            {
                "plugin": {"name": "framework", "version": "1.4.0"},
                "skills": {
                    "init": "framework-initialization",
                    "methodology": "framework-methodology",
                },
            }
        ]
    }


@memkit.config.configurable("builder")
@dataclasses.dataclass
class BuilderConfig:
    profile: str = "DEVELOPER"

    # Plugin install layout; skill_local is relative to $HOME
    skill_local: str = ".claude/plugins/cache"
    skill_container: str = "/mnt/skills/user"

    # Unit definitions: <units_path>/{profiles,instructions}/*.toml
    units_path: str = "units"

    # Container-bootstrap packages
    package_output: str = "packages"
    package_excludes: list[str] = dataclasses.field(
        default_factory=lambda: ["__pycache__", "node_modules"]
    )

    # Documentation
    conversation_path: str = ".claude/conversations"
    diary_path: str = ".claude/diary"

    geolocation_service: str = "https://ipinfo.io/json"
    geolocation_timeout: float = 2.0

    plugins: dict[str, list[dict[str, Any]]] = dataclasses.field(
        default_factory=_default_plugins
    )


@dataclasses.dataclass(frozen=True)
class Settings:
    base_path: pathlib.Path
    home: pathlib.Path
    profile: str
    skill_local: pathlib.Path
    skill_container: pathlib.Path
    units_path: pathlib.Path
    package_output: pathlib.Path
    package_excludes: tuple[str, ...]
    conversation_path: pathlib.Path
    diary_path: pathlib.Path
    geolocation: str | None
    geolocation_service: str
    geolocation_timeout: float
    registry: memkit.builder.registry.SkillRegistry
    template_path: pathlib.Path | None = None


def _anchored(base: pathlib.Path, value: str) -> pathlib.Path:
    path = pathlib.Path(value).expanduser()
    return path if path.is_absolute() else base / path


def resolve_settings(
    cfg: BuilderConfig,
    *,
    base_path: pathlib.Path,
    environ: Mapping[str, str] | None = None,
    home: pathlib.Path | None = None,
) -> Settings:
    """Apply ``MEMKIT_*`` overrides to *cfg* and resolve every path.

    Recognised overrides: ``MEMKIT_CONVERSATION_PATH``, ``MEMKIT_DIARY_PATH``,
    ``MEMKIT_PACKAGE_PATH``, ``MEMKIT_TEMPLATE_PATH``, ``MEMKIT_PROFILE`` and
    ``MEMKIT_GEOLOCATION``. Override paths are used verbatim; configured
    paths are relative to *base_path*.
    """
    if environ is None:
        environ = os.environ
    if home is None:
        home = pathlib.Path.home()

    def override(key: str) -> str | None:
        return environ.get(f"{ENV_PREFIX}{key}") or None

    def path_setting(key: str, configured: str) -> pathlib.Path:
        value = override(key)
        return pathlib.Path(value) if value else _anchored(base_path, configured)

    template = override("TEMPLATE_PATH")
    return Settings(
        base_path=base_path,
        home=home,
        profile=override("PROFILE") or cfg.profile,
        skill_local=home / cfg.skill_local,
        skill_container=pathlib.Path(cfg.skill_container),
        units_path=_anchored(base_path, cfg.units_path),
        package_output=path_setting("PACKAGE_PATH", cfg.package_output),
        package_excludes=tuple(cfg.package_excludes),
        conversation_path=path_setting("CONVERSATION_PATH", cfg.conversation_path),
        diary_path=path_setting("DIARY_PATH", cfg.diary_path),
        geolocation=override("GEOLOCATION"),
        geolocation_service=cfg.geolocation_service,
        geolocation_timeout=cfg.geolocation_timeout,
        registry=memkit.builder.registry.SkillRegistry(cfg.plugins),
        template_path=pathlib.Path(template) if template else None,
    )


def with_template_path(settings: Settings, container: bool) -> Settings:
    """Fill in the methodology skill's templates dir unless overridden."""
    if settings.template_path is not None:
        return settings
    skill = settings.registry.require("methodology")
    if container:
        skill_dir = settings.skill_container / skill.skill_name
    else:
        skill_dir = skill.local_dir(settings.skill_local)
    return dataclasses.replace(settings, template_path=skill_dir / "templates")


def load_settings(
    root: pathlib.Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load the ``builder`` section and resolve it for the project root."""
    base = memkit.config.find_root(root)
    cfg = memkit.config.load("builder", base)
    return resolve_settings(cfg, base_path=base, environ=environ)
