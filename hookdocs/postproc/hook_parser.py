"""Parse generated hook pages into structured records."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..markdown import front_matter_value, read_markdown, split_front_matter
from ..models import HookParameter, HookRecord, SourceLocation

MAX_RELATED = 5

_HEADING = re.compile(r"^# (?:Action|Filter):\s*(.+?)\s*$", re.MULTILINE)
_DESCRIPTION = re.compile(r"^# (?:Action|Filter):[^\n]+\n\n([^#`|\n][^\n]*)", re.MULTILINE)
_PARAMETERS = re.compile(r"## Parameters\n\n\|[^\n]+\n\|[^\n]+\n((?:\|[^\n]+\n?)*)")
_EXAMPLE = re.compile(r"## Usage Example\n\n```php\n(.*?)```", re.DOTALL)
_SINCE = re.compile(r"### Since\n\n-\s*(.+)")
_SOURCE = re.compile(r"Defined in `([^`]+)` at line (\d+)")
_NESTED_MARKER = re.compile(r"^(?:â†³|↳)\s*")

# Checked in order against the lower-cased hook name.
CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("entries", ("entry", "entries")),
    ("fields", ("field",)),
    ("search", ("search", "filter")),
    ("rendering", ("template", "render")),
    ("editing", ("edit",)),
    ("views", ("view",)),
    ("forms", ("form",)),
    ("widgets", ("widget",)),
    ("export", ("export",)),
    ("import", ("import",)),
    ("calendar", ("calendar", "event")),
    ("charts", ("chart",)),
    ("maps", ("map", "marker")),
    ("kanban", ("board", "card", "lane")),
    ("approval", ("approval", "approve")),
    ("notifications", ("notification", "email")),
    ("permissions", ("permission", "capability", "access")),
    ("admin", ("admin",)),
    ("frontend", ("frontend",)),
    ("api", ("api", "rest")),
    ("shortcodes", ("shortcode",)),
    ("assets", ("script", "style", "css")),
    ("caching", ("cache",)),
    ("before", ("before", "pre_")),
    ("after", ("after", "post_")),
)
FALLBACK_CATEGORY = "general"


def parse_hook_file(path: Path, product_id: str, kind: str) -> Optional[HookRecord]:
    """Build a record from one hook page; index pages yield None."""
    if path.stem == "index":
        return None
    return parse_hook_markdown(read_markdown(path), path.stem, product_id, kind)


def parse_hook_markdown(text: str, file_id: str, product_id: str, kind: str) -> HookRecord:
    front_matter, body = split_front_matter(text)
    hook_id = front_matter_value(front_matter, "id") or file_id
    name = _hook_name(body, front_matter, hook_id)
    parameters = parse_parameters(body)

    description_match = _DESCRIPTION.search(body)
    description = description_match.group(1).strip() if description_match else ""
    if not _usable_description(description):
        description = synthesize_description(name, kind, parameters)

    example_match = _EXAMPLE.search(body)
    since_match = _SINCE.search(body)
    source_match = _SOURCE.search(body)

    return HookRecord(
        id=hook_id,
        name=name,
        kind=kind,
        product=product_id,
        description=description,
        parameters=parameters,
        categories=infer_categories(name),
        example=example_match.group(1).strip() if example_match else None,
        since=since_match.group(1).strip() if since_match else None,
        source=(
            SourceLocation(file=source_match.group(1), line=int(source_match.group(2)))
            if source_match
            else None
        ),
    )


def parse_parameters(body: str) -> List[HookParameter]:
    match = _PARAMETERS.search(body)
    if not match:
        return []
    parameters: List[HookParameter] = []
    for row in match.group(1).strip().splitlines():
        cells = [cell.strip() for cell in row.split("|")]
        cells = [cell for cell in cells if cell]
        if len(cells) < 3:
            continue
        parameters.append(
            HookParameter(
                name=_clean_parameter_name(cells[0]),
                type=cells[1].replace("`", ""),
                description=cells[2],
            )
        )
    return parameters


def synthesize_description(
    name: str, kind: str, parameters: Sequence[HookParameter] = ()
) -> str:
    """Fallback description built from the hook name when the page has none."""
    parts = [part for part in re.split(r"[/_]", name) if part]
    verb = "Fires" if kind == "action" else "Filters"
    context = " ".join(parts[-2:]).replace("-", " ")

    for timing in ("before", "after"):
        if re.search(rf"[/_]{timing}", name):
            subject = " ".join(context.replace(timing, "", 1).split())
            return f"{verb} {timing} {subject} processing." if subject else f"{verb} {timing} processing."
    if kind == "filter" and parameters:
        return f"Filters the {parameters[0].name.replace('_', ' ')} value."
    return f"{verb} during {context or name} processing."


def infer_categories(name: str) -> List[str]:
    lowered = name.lower()
    categories = [
        tag for tag, keywords in CATEGORY_KEYWORDS if any(keyword in lowered for keyword in keywords)
    ]
    return categories or [FALLBACK_CATEGORY]


def link_related(records: Iterable[HookRecord]) -> None:
    """Fill ``related`` on every record using before/after pairs and shared prefixes."""
    items = list(records)
    keys = [(_base_name(record.name), _prefix(record.name)) for record in items]
    for record, (base, prefix) in zip(items, keys):
        related: List[str] = []
        for other, (other_base, other_prefix) in zip(items, keys):
            if other.name == record.name or other.name in related:
                continue
            if base == other_base:
                related.append(other.name)
            elif prefix and prefix == other_prefix and len(related) < MAX_RELATED:
                related.append(other.name)
        record.related = related[:MAX_RELATED]


def ensure_unique_ids(records: List[HookRecord], file_ids: Sequence[str]) -> None:
    """Fall back to the file stem when front-matter ids collide within one kind."""
    seen: Set[str] = set()
    for record, file_id in zip(records, file_ids):
        if record.id in seen:
            candidate, suffix = file_id, 2
            while candidate in seen:
                candidate = f"{file_id}-{suffix}"
                suffix += 1
            record.id = candidate
        seen.add(record.id)


def _hook_name(body: str, front_matter: Dict[str, object], hook_id: str) -> str:
    heading = _HEADING.search(body)
    if heading:
        return heading.group(1)
    return front_matter_value(front_matter, "sidebar_label") or hook_id


def _usable_description(text: str) -> bool:
    if not text or text.startswith(("|", "`")) or text == "Name":
        return False
    return len(text) >= 10


def _clean_parameter_name(raw: str) -> str:
    name = raw.strip()
    name = name[1:] if name.startswith("$") else name
    name = _NESTED_MARKER.sub("", name)
    name = name[1:] if name.startswith("$") else name
    return name.strip()


def _base_name(name: str) -> str:
    base = re.sub(r"(?:/|_)(?:before|after)$", "", name)
    base = base.replace("/pre_", "/", 1)
    return base.replace("/post_", "/", 1)


def _prefix(name: str) -> str:
    return name.rsplit("/", 1)[0] if "/" in name else ""


__all__ = [
    "CATEGORY_KEYWORDS",
    "FALLBACK_CATEGORY",
    "MAX_RELATED",
    "ensure_unique_ids",
    "infer_categories",
    "link_related",
    "parse_hook_file",
    "parse_hook_markdown",
    "parse_parameters",
    "synthesize_description",
]
