"""Front-matter helpers for generated hook pages."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

_FRONT_MATTER = re.compile(r"\A---\n(.*?)\n---[ \t]*(?:\n|\Z)", re.DOTALL)
_FIELD_LINE = re.compile(r"^([A-Za-z_][\w-]*):\s*(.*?)\s*$")


def read_markdown(path: Path) -> str:
    """Read a markdown file with normalized newlines."""
    text = path.read_text(encoding="utf-8")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_front_matter(text: str) -> Tuple[Dict[str, Any], str]:
    """Return ``(front_matter, body)``; pages without front matter get ``{}``."""
    match = _FRONT_MATTER.match(text)
    if not match:
        return {}, text
    raw = match.group(1)
    body = text[match.end() :].lstrip("\n")
    try:
        loaded = yaml.safe_load(raw)
    except yaml.YAMLError:
        # Unquoted values such as `title: Action: foo` are not valid YAML.
        loaded = _parse_fields(raw)
    if not isinstance(loaded, dict):
        loaded = _parse_fields(raw)
    return loaded, body


def front_matter_value(front_matter: Dict[str, Any], key: str) -> Optional[str]:
    value = front_matter.get(key)
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _parse_fields(raw: str) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    for line in raw.splitlines():
        match = _FIELD_LINE.match(line)
        if not match:
            continue
        value = match.group(2)
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
            value = value[1:-1]
        fields[match.group(1)] = value
    return fields


__all__ = ["front_matter_value", "read_markdown", "split_front_matter"]
