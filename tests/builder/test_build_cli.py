"""Tests for the ``memkit build`` and ``memkit load`` entry points."""

from __future__ import annotations

import pathlib
import unittest.mock

import pytest

import memkit.builder.__main__


@pytest.fixture
def project(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> pathlib.Path:
    root = tmp_path / "project"
    (root / ".memkit").mkdir(parents=True)
    (root / ".memkit" / "config.toml").write_text('[builder]\nprofile = "DEVELOPER"\n')
    for key in ("MEMKIT_PROFILE", "MEMKIT_PACKAGE_PATH", "MEMKIT_TEMPLATE_PATH"):
        monkeypatch.delenv(key, raising=False)
    return root


@pytest.fixture
def builder_cls():
    with unittest.mock.patch("memkit.builder.memory.MemoryBuilder") as cls:
        cls.return_value.build.return_value = True
        yield cls


class TestBuildCommand:
    def test_default_profile_emits_envelope(self, project, builder_cls) -> None:
        assert memkit.builder.__main__.main(["--path", str(project)]) == 0
        profile, settings, container = builder_cls.call_args.args
        assert profile is None
        assert container is False
        assert settings.base_path == project

    def test_explicit_default_profile_is_envelope_too(self, project, builder_cls) -> None:
        memkit.builder.__main__.main(["-p", "DEVELOPER", "--path", str(project)])
        assert builder_cls.call_args.args[0] is None

    def test_other_profile_is_built(self, project, builder_cls) -> None:
        memkit.builder.__main__.main(["--profile", "RESEARCHER", "--path", str(project)])
        assert builder_cls.call_args.args[0] == "RESEARCHER"

    def test_container_builds_default_profile(self, project, builder_cls) -> None:
        memkit.builder.__main__.main(["-c", "--path", str(project)])
        profile, _, container = builder_cls.call_args.args
        assert profile == "DEVELOPER"
        assert container is True

    def test_failure_exit_code(self, project, builder_cls) -> None:
        builder_cls.return_value.build.return_value = False
        assert memkit.builder.__main__.main(["--path", str(project)]) == 1


class TestLoadCommand:
    def test_outside_container_builds_configured_profile(
        self, project, builder_cls, monkeypatch
    ) -> None:
        monkeypatch.setenv("MEMKIT_CONTAINER", "0")
        assert memkit.builder.__main__.load_main(["--path", str(project)]) == 0
        assert builder_cls.call_args.args[0] == "DEVELOPER"
        assert builder_cls.call_args.kwargs == {"in_container": False}

    def test_inside_container_emits_envelope(self, project, builder_cls, monkeypatch) -> None:
        monkeypatch.setenv("MEMKIT_CONTAINER", "1")
        builder_cls.return_value.build.return_value = False
        assert memkit.builder.__main__.load_main(["--path", str(project)]) == 0
        assert builder_cls.call_args.args[0] is None
        assert builder_cls.call_args.kwargs == {"in_container": True}

    def test_outside_failure_exit_code(self, project, builder_cls, monkeypatch) -> None:
        monkeypatch.setenv("MEMKIT_CONTAINER", "0")
        builder_cls.return_value.build.return_value = False
        assert memkit.builder.__main__.load_main(["--path", str(project)]) == 1
