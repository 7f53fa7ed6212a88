"""Configuration for the reflection (diary) reader."""

from __future__ import annotations

import dataclasses

import memkit.config


@memkit.config.configurable("reflections")
@dataclasses.dataclass
class ReflectionsConfig:
    # GitHub repository holding the dated entries
    organization: str = "axivo"
    name: str = "claude-reflections"
    branch: str = "main"
    path: str = "diary"
    extension: str = ".md"

    # Transport
    api_url: str = "https://api.github.com"
    timeout: float = 10.0
    # Optional personal access token; anonymous requests are rate limited
    token: str = ""
