"""Detection of the container (bootstrap target) runtime."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from memkit.builder.config import Settings

CONTAINER_ENV = "MEMKIT_CONTAINER"


def is_container(settings: Settings, environ: Mapping[str, str] | None = None) -> bool:
    """True when already running inside the container environment.

    ``MEMKIT_CONTAINER`` wins when set; otherwise the container skill
    mount must exist.
    """
    if environ is None:
        environ = os.environ
    flag = environ.get(CONTAINER_ENV)
    if flag is not None:
        return flag.lower() in ("1", "true", "yes")
    return settings.skill_container.is_dir()
