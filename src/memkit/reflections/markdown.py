"""Markdown → JSON-serialisable syntax tree.

Thin adapter over ``markdown-it-py``: the flat token stream is folded into
nested nodes so reflection entries can be emitted as structured JSON.
"""

from __future__ import annotations

from typing import Any

import markdown_it
import markdown_it.tree

_md = markdown_it.MarkdownIt("commonmark")


def _node_to_dict(node: markdown_it.tree.SyntaxTreeNode) -> dict[str, Any]:
    out: dict[str, Any] = {"type": node.type}
    if node.tag:
        out["tag"] = node.tag
    if node.attrs:
        out["attrs"] = dict(node.attrs)
    if node.info:
        out["info"] = node.info
    if node.type in ("text", "code_inline", "code_block", "fence", "html_block", "html_inline"):
        out["content"] = node.content
    if node.children:
        out["children"] = [_node_to_dict(child) for child in node.children]
    return out


def parse(text: str) -> list[dict[str, Any]]:
    """Parse *text* into a list of top-level block nodes."""
    root = markdown_it.tree.SyntaxTreeNode(_md.parse(text))
    return [_node_to_dict(child) for child in root.children]
