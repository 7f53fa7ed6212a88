"""Durable JSON emission for build artifacts."""

from __future__ import annotations

import json
import logging
import os
import pathlib
from typing import Any

import memkit.errors
import memkit.markers

logger = logging.getLogger("memkit.builder.writer")

STDOUT = "stdout"


def write(data: Any, destination: str | os.PathLike[str] | None = STDOUT) -> None:
    """Print *data* as indented JSON, or write it compactly to a file.

    File writes create missing parent directories and are flushed with
    ``fsync`` before the handle is closed. Nothing is rolled back when a
    later write in the same run fails.
    """
    if not destination or destination == STDOUT:
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return

    path = pathlib.Path(destination).resolve()
    payload = json.dumps(
        data, ensure_ascii=False, separators=memkit.markers.COMPACT
    ).encode("utf-8")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as fh:
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
    except OSError as exc:
        raise memkit.errors.WriteError(
            f"Failed to write {path} output file: {exc}", "OUTPUT_WRITE_ERROR"
        ) from exc
    logger.info("Wrote %s (%d bytes)", path, len(payload))
