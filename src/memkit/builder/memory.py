"""Build orchestration: load units, pick the target, generate."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import memkit.builder.config
import memkit.builder.environment
import memkit.builder.generator
import memkit.builder.units
import memkit.errors

if TYPE_CHECKING:
    from memkit.builder.config import Settings

logger = logging.getLogger("memkit.builder")

LOCAL_INSTRUCTIONS = "LOCAL"
CONTAINER_INSTRUCTIONS = "CONTAINER"


class MemoryBuilder:
    """Coordinates unit loading and output generation for one run.

    With no *profile_name* only the ``{profile, timestamp}`` envelope for
    the default profile is emitted.
    """

    def __init__(
        self,
        profile_name: str | None,
        settings: Settings,
        container: bool = False,
        *,
        in_container: bool | None = None,
    ) -> None:
        self.profile_name = profile_name
        self.settings = settings
        self.container = container
        if in_container is None:
            in_container = memkit.builder.environment.is_container(settings)
        self.in_container = in_container

    def _generator(self, container: bool, profile_name: str | None) -> memkit.builder.generator.OutputGenerator:
        return memkit.builder.generator.OutputGenerator(
            self.settings, container, profile_name, in_container=self.in_container
        )

    def run(self) -> None:
        """Perform the build; raises :class:`memkit.errors.MemkitError`."""
        container = self.container or self.in_container
        self.settings = memkit.builder.config.with_template_path(self.settings, container)
        default_profile = self.settings.profile

        if not self.profile_name:
            self._generator(False, default_profile).generate_output()
            return

        profiles_loader = memkit.builder.units.UnitLoader(self.settings.units_path, "profiles")
        instructions_loader = memkit.builder.units.UnitLoader(
            self.settings.units_path, "instructions"
        )
        profiles = profiles_loader.build(self.profile_name)
        instructions = instructions_loader.build(
            CONTAINER_INSTRUCTIONS if container else LOCAL_INSTRUCTIONS
        )
        generator = self._generator(container, self.profile_name)

        if generator.bootstrap:
            logger.info("Building container bootstrap for %s", self.profile_name)
            result = generator.generate(instructions, profiles, return_only=True)
            # Outside the container the local install is rebuilt as well
            local = self._generator(False, default_profile)
            local.generate(
                instructions_loader.build(LOCAL_INSTRUCTIONS),
                profiles_loader.build(default_profile),
                return_only=True,
            )
            generator.output(result)
        else:
            generator.generate(instructions, profiles)

    def build(self) -> bool:
        """Run the build, reporting failure as a one-line diagnostic."""
        try:
            self.run()
        except memkit.errors.MemkitError as exc:
            logger.debug("Build failed", exc_info=True)
            print(f"Build failed: {exc}", file=sys.stderr)
            return False
        return True
