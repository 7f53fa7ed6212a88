"""Zip packaging of installed skill directories."""

from __future__ import annotations

import fnmatch
import logging
import pathlib
import zipfile
from collections.abc import Iterable

import memkit.errors

logger = logging.getLogger("memkit.builder.packager")


def _excluded(relative: pathlib.PurePath, patterns: list[str]) -> bool:
    # tar --exclude semantics: a glob hits the whole path or any component
    text = relative.as_posix()
    for pattern in patterns:
        if fnmatch.fnmatchcase(text, pattern) or fnmatch.fnmatchcase(text, f"{pattern}/*"):
            return True
        if any(fnmatch.fnmatchcase(part, pattern) for part in relative.parts):
            return True
    return False


def _members(source: pathlib.Path, skill_name: str, excludes: Iterable[str]) -> list[pathlib.Path]:
    skill_dir = source / skill_name
    patterns = [pattern.strip("/") for pattern in excludes if pattern.strip("/")]
    members = []
    for path in sorted(skill_dir.rglob("*")):
        if not path.is_file():
            continue
        if _excluded(path.relative_to(skill_dir), patterns):
            continue
        members.append(path)
    return members


def package_skill(
    skills_dir: pathlib.Path,
    skill_name: str,
    output_dir: pathlib.Path,
    excludes: Iterable[str] = (),
) -> pathlib.Path | None:
    """Archive ``<skills_dir>/<skill_name>`` to ``<output_dir>/<skill_name>.zip``.

    Archive members are rooted at ``<skill_name>/``. Paths matching an *excludes*
    glob, in full or in any single component, are left out. Returns ``None`` when the
    skill directory does not exist; a previous archive is always replaced.
    """
    skill_dir = skills_dir / skill_name
    if not skill_dir.is_dir():
        logger.debug("Skill %s not installed at %s, skipping", skill_name, skill_dir)
        return None

    zip_path = output_dir / f"{skill_name}.zip"
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        zip_path.unlink(missing_ok=True)
        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for member in _members(skills_dir, skill_name, excludes):
                zf.write(member, member.relative_to(skills_dir).as_posix())
    except (OSError, zipfile.BadZipFile) as exc:
        raise memkit.errors.PackageError(
            f"Failed to create {skill_name} zip archive: {exc}", "ZIP_CREATE_ERROR"
        ) from exc
    logger.info("Packaged %s", zip_path)
    return zip_path
