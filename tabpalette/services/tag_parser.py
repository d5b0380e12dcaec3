"""
Tag extraction from note content.

Tags come from two places: inline '#tag' tokens in the body and the
'tags' key of the YAML frontmatter. Both are normalized to '#tag'.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_FRONTMATTER_RE = re.compile(r"\A---\s*\n(.*?)\n---\s*(?:\n|\Z)", re.DOTALL)
_FENCE_RE = re.compile(r"^(```|~~~).*?^\1", re.MULTILINE | re.DOTALL)
_INLINE_CODE_RE = re.compile(r"`[^`\n]*`")
# A tag starts after whitespace or line start and must not be purely numeric
_INLINE_TAG_RE = re.compile(r"(?:(?<=\s)|^)#([\w/-]*[^\W\d][\w/-]*)", re.MULTILINE)


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter mapping, body). Invalid YAML yields an empty mapping."""
    fm_match = _FRONTMATTER_RE.match(text)
    if not fm_match:
        return {}, text

    body = text[fm_match.end():]
    try:
        frontmatter = yaml.safe_load(fm_match.group(1)) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Ignoring invalid YAML frontmatter: {e}")
        return {}, body
    if not isinstance(frontmatter, dict):
        return {}, body
    return frontmatter, body


def _normalize(tag: Any) -> str | None:
    value = str(tag).strip().lstrip("#")
    return f"#{value}" if value else None


def frontmatter_tags(frontmatter: dict[str, Any]) -> list[str]:
    """Tags from frontmatter; the value may be a single string or a list."""
    raw = frontmatter.get("tags", frontmatter.get("tag"))
    if raw is None:
        return []
    values = raw if isinstance(raw, list) else [raw]
    tags = []
    for value in values:
        tag = _normalize(value)
        if tag:
            tags.append(tag)
    return tags


def inline_tags(body: str) -> list[str]:
    """'#tag' tokens in the body, ignoring code blocks and inline code."""
    stripped = _FENCE_RE.sub("", body)
    stripped = _INLINE_CODE_RE.sub("", stripped)
    return [f"#{m.group(1)}" for m in _INLINE_TAG_RE.finditer(stripped)]


def extract_tags(text: str) -> list[str]:
    """All tags of a note: inline first, then frontmatter, without duplicates."""
    frontmatter, body = split_frontmatter(text)
    seen: set[str] = set()
    tags = []
    for tag in inline_tags(body) + frontmatter_tags(frontmatter):
        if tag not in seen:
            seen.add(tag)
            tags.append(tag)
    return tags
