"""Skill/plugin registry lookups.

The registry is the nested mapping from configuration::

    {group: [{"plugin": {"name", "version"}, "skills": {key: skill_name}}]}
"""

from __future__ import annotations

import pathlib
from collections.abc import Iterator
from typing import Any, NamedTuple

import memkit.errors


class SkillRef(NamedTuple):
    plugin_name: str
    plugin_version: str
    skill_name: str

    def local_dir(self, skill_local: pathlib.Path) -> pathlib.Path:
        """Install dir of this skill under the local plugin cache."""
        return (
            skill_local
            / self.plugin_name
            / self.plugin_version
            / "skills"
            / self.skill_name
        )


class SkillRegistry:
    def __init__(self, plugins: dict[str, list[dict[str, Any]]]) -> None:
        self.plugins = plugins

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SkillRegistry) and self.plugins == other.plugins

    def __repr__(self) -> str:
        return f"SkillRegistry({self.plugins!r})"

    def _entries(self) -> Iterator[tuple[dict[str, Any], dict[str, str]]]:
        for plugin_list in self.plugins.values():
            for entry in plugin_list:
                yield entry["plugin"], entry.get("skills") or {}

    def find(self, skill_key: str) -> SkillRef | None:
        """Return the first skill registered under *skill_key*."""
        for plugin, skills in self._entries():
            if skills.get(skill_key):
                return SkillRef(plugin["name"], str(plugin["version"]), skills[skill_key])
        return None

    def require(self, skill_key: str) -> SkillRef:
        ref = self.find(skill_key)
        if ref is None:
            raise memkit.errors.ConfigError(
                f"No plugin registers a {skill_key!r} skill", "ERR_CONFIG_INVALID"
            )
        return ref

    def __iter__(self) -> Iterator[SkillRef]:
        """Yield every registered skill across every plugin, in config order."""
        for plugin, skills in self._entries():
            for skill_name in skills.values():
                yield SkillRef(plugin["name"], str(plugin["version"]), skill_name)
