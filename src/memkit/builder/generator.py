"""Artifact generation for the local and container-bootstrap targets.

Both targets sort instructions and profiles into versioned artifacts and
inject them into the methodology skill's ``SKILL.md``. The bootstrap target
(requested from outside a container) also zips every registered skill and
writes the artifacts as JSON files next to the archives, returning the
manifest of emitted paths.
"""

from __future__ import annotations

import logging
import pathlib
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

import memkit.builder.environment
import memkit.builder.packager
import memkit.builder.sorter
import memkit.builder.timestamp
import memkit.builder.writer
import memkit.errors
import memkit.markers

if TYPE_CHECKING:
    from memkit.builder.config import Settings
    from memkit.builder.registry import SkillRef

logger = logging.getLogger("memkit.builder.generator")

INSTRUCTIONS_MARKER = "instructions"
MEMORY_MARKER = "memory"
HOST_DOCUMENT = "SKILL.md"


class OutputGenerator:
    def __init__(
        self,
        settings: Settings,
        container: bool = False,
        profile_name: str | None = None,
        *,
        in_container: bool | None = None,
        locate: Callable[[], dict[str, str]] | None = None,
    ) -> None:
        self.settings = settings
        self.container = container
        self.profile_name = profile_name or settings.profile
        if in_container is None:
            in_container = memkit.builder.environment.is_container(settings)
        self.in_container = in_container
        if locate is None:
            locate = self._locate
        self.locate = locate

    @property
    def bootstrap(self) -> bool:
        """True for the container-bootstrap target."""
        return self.container and not self.in_container

    def _locate(self) -> dict[str, str]:
        return memkit.builder.timestamp.fetch_geolocation(
            self.settings.geolocation,
            self.settings.geolocation_service,
            self.settings.geolocation_timeout,
        )

    def _methodology(self) -> SkillRef:
        return self.settings.registry.require("methodology")

    def host_document(self) -> pathlib.Path:
        """``SKILL.md`` of the methodology skill for the active runtime."""
        skill = self._methodology()
        if self.container and self.in_container:
            return self.settings.skill_container / skill.skill_name / HOST_DOCUMENT
        return skill.local_dir(self.settings.skill_local) / HOST_DOCUMENT

    def _rewrite_host(self, transform: Callable[[str], str]) -> None:
        path = self.host_document()
        try:
            content = path.read_text(encoding="utf-8")
            updated = transform(content)
            if updated != content:
                path.write_text(updated, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise memkit.errors.WriteError(
                f"Failed to update {path}: {exc}", "HOST_DOCUMENT_ERROR"
            ) from exc

    def clear_payload(self, marker: str) -> None:
        """Blank the *marker* block of the host document."""
        self._rewrite_host(lambda content: memkit.markers.clear_block(content, marker))

    def inject(self, marker: str, data: Any) -> None:
        """Replace the *marker* block of the host document with *data*."""
        self._rewrite_host(lambda content: memkit.markers.inject_json(content, marker, data))
        logger.debug("Injected %s payload", marker)

    def sorted_output(self, units: Mapping[str, Any], key: str) -> dict[str, Any]:
        return memkit.builder.sorter.sorted_output(
            units, key, self._methodology().plugin_version
        )

    def package_skills(self) -> list[pathlib.Path]:
        """Zip every registered skill that is installed locally."""
        paths = []
        for skill in self.settings.registry:
            skills_dir = skill.local_dir(self.settings.skill_local).parent
            zip_path = memkit.builder.packager.package_skill(
                skills_dir,
                skill.skill_name,
                self.settings.package_output,
                self.settings.package_excludes,
            )
            if zip_path is not None:
                paths.append(zip_path)
        return paths

    def write_json(self, filename: str, data: Any) -> pathlib.Path:
        path = self.settings.package_output / filename
        memkit.builder.writer.write(data, path)
        return path

    def generate(
        self,
        instructions: Mapping[str, Any],
        profiles: Mapping[str, Any],
        return_only: bool = False,
        skip_inject: bool = False,
    ) -> dict[str, Any] | bool:
        """Sort, package and emit; see the module docstring for targets.

        Returns the output envelope when *return_only*, else prints it and
        returns ``True``.
        """
        if not isinstance(instructions, Mapping):
            raise memkit.errors.InvalidInputError(
                "Instructions must be a mapping", "INVALID_INSTRUCTIONS"
            )
        if not isinstance(profiles, Mapping):
            raise memkit.errors.InvalidInputError(
                "Profiles must be a mapping", "INVALID_PROFILES"
            )
        instructions_data = self.sorted_output(instructions, "instructions")
        memory_data = self.sorted_output(profiles, "profiles")

        paths: list[pathlib.Path] | None = None
        if self.bootstrap:
            self.clear_payload(INSTRUCTIONS_MARKER)
            self.clear_payload(MEMORY_MARKER)
            paths = self.package_skills()
            paths.append(self.write_json("instructions.json", instructions_data))
            paths.append(self.write_json("memory.json", memory_data))

        if not skip_inject:
            self.inject(INSTRUCTIONS_MARKER, instructions_data)
            self.inject(MEMORY_MARKER, memory_data)

        if paths is not None:
            return self.generate_output(sorted(str(p) for p in paths), return_only)
        return self.generate_output(None, return_only)

    def generate_output(
        self, paths: list[str] | None = None, return_only: bool = False
    ) -> dict[str, Any] | bool:
        """Build ``{[paths,] profile, timestamp}``; return or print it."""
        timestamp = memkit.builder.timestamp.envelope(self.locate())
        output: dict[str, Any] = {}
        if paths is not None:
            output["paths"] = paths
        output["profile"] = self.profile_name
        output["timestamp"] = timestamp
        if return_only:
            return output
        self.output(output)
        return True

    def output(self, data: Any, destination: str | pathlib.Path = memkit.builder.writer.STDOUT) -> None:
        memkit.builder.writer.write(data, destination)
