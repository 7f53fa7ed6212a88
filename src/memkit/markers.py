"""Delimited payload blocks inside host documents (``SKILL.md``).

Markers follow the format::

    <!-- framework-{name}-start -->
    ...content...
    <!-- framework-{name}-end -->

All functions are string-based (no file I/O). Callers handle persistence.
"""

from __future__ import annotations

import json
import re
from typing import Any

NAMESPACE = "framework"

# JSON.stringify-style output: no spaces after separators
COMPACT = (",", ":")


def begin_tag(name: str) -> str:
    """Return the opening marker string for a named block."""
    return f"<!-- {NAMESPACE}-{name}-start -->"


def end_tag(name: str) -> str:
    """Return the closing marker string for a named block."""
    return f"<!-- {NAMESPACE}-{name}-end -->"


def _block_pattern(name: str) -> re.Pattern[str]:
    """Compile the regex for a named block, capturing both markers."""
    return re.compile(
        rf"({re.escape(begin_tag(name))})"
        rf"(.*?)"
        rf"({re.escape(end_tag(name))})",
        re.DOTALL,
    )


def extract_block(content: str, name: str) -> str | None:
    """Return the text strictly between the markers, or ``None`` if absent."""
    m = _block_pattern(name).search(content)
    return m.group(2) if m else None


def has_marker(content: str, name: str) -> bool:
    """Return True if the content contains a full marker pair for *name*."""
    return _block_pattern(name).search(content) is not None


def replace_block(content: str, name: str, new_content: str) -> str:
    """Replace everything between the first marker pair for *name*.

    The markers themselves and text outside them are preserved. Content
    without the markers is returned unchanged.
    """
    pattern = _block_pattern(name)
    return pattern.sub(
        lambda m: f"{m.group(1)}\n{new_content}{m.group(3)}", content, count=1
    )


def clear_block(content: str, name: str) -> str:
    """Blank a block, leaving only the marker pair on adjacent lines."""
    return replace_block(content, name, "")


def json_payload(data: Any) -> str:
    """Render *data* as a fenced compact JSON block ready for injection."""
    return f"```json\n{json.dumps(data, ensure_ascii=False, separators=COMPACT)}\n```\n"


def inject_json(content: str, name: str, data: Any) -> str:
    """Replace the *name* block with a fenced JSON payload."""
    return replace_block(content, name, json_payload(data))


def make_empty_block(name: str) -> str:
    """Return an empty marker pair ready for insertion."""
    return f"{begin_tag(name)}\n{end_tag(name)}"
