"""Shared test fixtures for memkit tests."""

from __future__ import annotations

import pathlib
from typing import Any

import pytest

import memkit.builder.config
import memkit.config
import memkit.errors
import memkit.markers

SKILL_MD = """\
---
name: framework-methodology
---

# Methodology

## Instructions
{instructions}

## Memory
{memory}

Trailing text stays put.
"""


@pytest.fixture(autouse=True)
def _isolated_global_config(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Never read the developer's ~/.config/memkit/config.toml."""
    global_toml = tmp_path_factory.mktemp("global") / "config.toml"
    monkeypatch.setattr(memkit.config, "_global_path", lambda: global_toml)
    monkeypatch.delenv("MEMKIT_CONTAINER", raising=False)


class FakeStore:
    """In-memory stand-in for the GitHub contents API.

    *files* maps full repository paths to text. Directories are implied by
    the paths. Paths in *failing* raise a retrieval error when touched.
    """

    def __init__(
        self,
        files: dict[str, str] | None = None,
        failing: set[str] | None = None,
    ) -> None:
        self.files = dict(files or {})
        self.failing = set(failing or ())
        self.calls: list[tuple[str, str]] = []

    def _check(self, op: str, path: str) -> None:
        self.calls.append((op, path))
        if path in self.failing:
            raise memkit.errors.RetrievalError(f"boom: {path}", "ERR_API_REQUEST")

    def list_directory(self, path: str) -> list[dict[str, Any]] | None:
        self._check("list", path)
        prefix = f"{path}/"
        children: dict[str, str] = {}
        for file_path in self.files:
            if not file_path.startswith(prefix):
                continue
            head, sep, _ = file_path[len(prefix):].partition("/")
            children.setdefault(head, "dir" if sep else "file")
        if not children:
            return None
        return [{"name": name, "type": kind} for name, kind in sorted(children.items())]

    def get_raw(self, path: str) -> str | None:
        self._check("raw", path)
        return self.files.get(path)


@pytest.fixture
def fake_store():
    """Factory for :class:`FakeStore` instances."""
    return FakeStore


@pytest.fixture
def plugins() -> dict[str, list[dict[str, Any]]]:
    return {
        "framework": [
            {
                "plugin": {"name": "framework", "version": "2.1.0"},
                "skills": {
                    "init": "framework-initialization",
                    "methodology": "framework-methodology",
                },
            }
        ],
        "extras": [
            {
                "plugin": {"name": "toolbox", "version": "0.3.0"},
                "skills": {"review": "code-review", "ghost": "not-installed"},
            }
        ],
    }


@pytest.fixture
def settings(
    tmp_path: pathlib.Path, plugins: dict[str, list[dict[str, Any]]]
) -> memkit.builder.config.Settings:
    """Resolved settings rooted in *tmp_path* with a fake $HOME."""
    cfg = memkit.builder.config.BuilderConfig(profile="DEVELOPER", plugins=plugins)
    project = tmp_path / "project"
    project.mkdir()
    return memkit.builder.config.resolve_settings(
        cfg,
        base_path=project,
        environ={},
        home=tmp_path / "home",
    )


@pytest.fixture
def installed_skills(settings: memkit.builder.config.Settings) -> pathlib.Path:
    """Install the methodology, init and review skills under the fake $HOME.

    Returns the methodology ``SKILL.md`` (the injection host document).
    """
    for skill in settings.registry:
        if skill.skill_name == "not-installed":
            continue
        skill_dir = skill.local_dir(settings.skill_local)
        (skill_dir / "scripts" / "__pycache__").mkdir(parents=True)
        (skill_dir / "scripts" / "run.py").write_text("print('hi')\n")
        (skill_dir / "scripts" / "__pycache__" / "run.cpython-312.pyc").write_bytes(b"\0")
        (skill_dir / "SKILL.md").write_text(f"# {skill.skill_name}\n")

    host = settings.registry.require("methodology").local_dir(settings.skill_local) / "SKILL.md"
    host.write_text(
        SKILL_MD.format(
            instructions=memkit.markers.make_empty_block("instructions"),
            memory=memkit.markers.make_empty_block("memory"),
        )
    )
    return host


@pytest.fixture
def write_unit():
    """Factory writing ``<units>/<namespace>/<name>.toml``."""

    def _write(units: pathlib.Path, namespace: str, name: str, body: str) -> pathlib.Path:
        path = units / namespace / f"{name}.toml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body)
        return path

    return _write
