"""Tests for the JSON hook catalog and usage example enhancement."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

from hookdocs.postproc.enhancer import Enhancer

CONFIG = """
output_dir: docs/hooks
api_dir: static/api
llms_txt: static/llms.txt
categories:
  gravitykit:
    label: GravityKit
    position: 1
products:
  - id: gravityview
    repo: GravityKit/GravityView
    label: GravityView
    category: gravitykit
  - id: gravityview-maps
    repo: GravityKit/Maps
    label: Maps
  - id: gravityview-datatables
    repo: GravityKit/DataTables
    label: DataTables
  - id: gravityview-empty
    repo: GravityKit/Empty
    label: Empty
"""

EXAMPLE_PAGE = """
---
id: gravityview-field-output
sidebar_label: gravityview/field/output
---

# Filter: gravityview/field/output

Modify the rendered output of a field.

## Parameters

| Name | Type | Description |
|------|------|-------------|
| $output | `string` | Field HTML |

## Usage Example

```php
add_filter( 'gravityview/field/output', 'custom_output' );
```

### Since

- 2.1
"""


def _clock(hour: int):
    return lambda: datetime(2026, 1, 2, hour, 0, 0, tzinfo=UTC)


def _build_site(docs_builder):
    docs_builder.write_config(CONFIG)
    product_dir = "docs/hooks/gravitykit/gravityview"
    docs_builder.hook_page(
        product_dir, "action", "gravityview/view/before", description="Fires before a View renders.", since="2.0"
    )
    docs_builder.hook_page(product_dir, "action", "gravityview/view/after")
    docs_builder.write(
        {
            f"{product_dir}/filters/gravityview-field-output.md": EXAMPLE_PAGE,
            f"{product_dir}/actions/index.md": "# Actions\n",
            "docs/hooks/gravityview-empty/index.md": "# Empty\n",
            "static/llms.txt": "# GravityKit Hooks\n",
        }
    )
    docs_builder.hook_page(
        "docs/hooks/gravityview-datatables",
        "filter",
        "gravityview/datatables/config",
        parameters=[("$config", "array", "DataTables options")],
    )
    return docs_builder.config()


def _read_json(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_run_writes_catalog_projections(docs_builder) -> None:
    config = _build_site(docs_builder)

    report = Enhancer(config, clock=_clock(3)).run()

    api = config.api_dir
    assert sorted(path.relative_to(api).as_posix() for path in report.written) == [
        "hooks-compact.json",
        "hooks.json",
        "hooks/gravityview-datatables.json",
        "hooks/gravityview.json",
        "hooks/index.json",
    ]
    assert report.catalog.stats == {
        "totalHooks": 4,
        "totalActions": 2,
        "totalFilters": 2,
        "productCount": 2,
    }

    full = _read_json(api / "hooks.json")
    assert full["generated"] == "2026-01-02T03:00:00Z"
    assert list(full["products"]) == ["gravityview", "gravityview-datatables"]
    assert full["products"]["gravityview"]["actions"] == ["gravityview/view/after", "gravityview/view/before"]
    names = [hook["name"] for hook in full["hooks"]]
    assert names == [
        "gravityview/view/after",
        "gravityview/view/before",
        "gravityview/field/output",
        "gravityview/datatables/config",
    ]

    before = full["hooks"][1]
    assert before["type"] == "action"
    assert before["description"] == "Fires before a View renders."
    assert before["since"] == "2.0"
    assert before["url"] == "/docs/hooks/gravitykit/gravityview/actions/gravityview-view-before/"
    assert before["related"] == ["gravityview/view/after"]
    assert full["hooks"][2]["example"] == "add_filter( 'gravityview/field/output', 'custom_output' );"

    index = _read_json(api / "hooks" / "index.json")
    assert index["baseUrl"] == "/api/hooks/"
    assert index["products"][0] == {
        "id": "gravityview",
        "label": "GravityView",
        "repo": "GravityKit/GravityView",
        "actions": 2,
        "filters": 1,
        "total": 3,
        "url": "/api/hooks/gravityview.json",
    }

    product = _read_json(api / "hooks" / "gravityview-datatables.json")
    assert product["stats"] == {"total": 1, "actions": 0, "filters": 1}
    assert product["hooks"][0]["parameters"] == [
        {"name": "config", "type": "array", "description": "DataTables options"}
    ]


def test_records_keep_kind_and_unique_ids(docs_builder) -> None:
    config = _build_site(docs_builder)

    catalog = Enhancer(config, clock=_clock(3)).collect()

    keys = [(hook.product, hook.kind, hook.id) for hook in catalog.hooks]
    assert all(hook.kind in ("action", "filter") for hook in catalog.hooks)
    assert len(keys) == len(set(keys))


def test_compact_projection_matches_full_order(docs_builder) -> None:
    config = _build_site(docs_builder)

    Enhancer(config, clock=_clock(3)).run()

    full = _read_json(config.api_dir / "hooks.json")["hooks"]
    compact_text = (config.api_dir / "hooks-compact.json").read_text(encoding="utf-8")
    compact = json.loads(compact_text)["hooks"]
    assert "\n" not in compact_text.rstrip("\n")
    assert len(compact) == len(full)
    assert [(item["n"], item["t"], item["p"], item["u"]) for item in compact] == [
        (hook["name"], hook["type"][0], hook["product"], hook["url"]) for hook in full
    ]


def test_examples_are_inserted_once(docs_builder) -> None:
    config = _build_site(docs_builder)
    product_dir = config.output_dir / "gravitykit" / "gravityview"
    custom_page = product_dir / "filters" / "gravityview-field-output.md"
    custom_before = custom_page.read_text(encoding="utf-8")

    report = Enhancer(config, clock=_clock(3)).run()

    assert report.enhanced == 3
    assert custom_page.read_text(encoding="utf-8") == custom_before
    before_page = (product_dir / "actions" / "gravityview-view-before.md").read_text(encoding="utf-8")
    assert before_page.index("## Usage Example") < before_page.index("### Since")
    assert "add_action( 'gravityview/view/before'" in before_page
    assert (product_dir / "actions" / "index.md").read_text(encoding="utf-8") == "# Actions\n"


def test_second_run_changes_nothing(docs_builder) -> None:
    config = _build_site(docs_builder)
    Enhancer(config, clock=_clock(3)).run()
    snapshot = {path: path.read_bytes() for path in config.api_dir.rglob("*.json")}
    pages = {path: path.read_bytes() for path in config.output_dir.rglob("*.md")}

    report = Enhancer(config, clock=_clock(9)).run()

    assert report.enhanced == 0
    assert report.written == []
    assert report.llms_updated is False
    assert {path: path.read_bytes() for path in config.api_dir.rglob("*.json")} == snapshot
    assert {path: path.read_bytes() for path in config.output_dir.rglob("*.md")} == pages


def test_llms_txt_statistics_are_updated(docs_builder) -> None:
    config = _build_site(docs_builder)

    report = Enhancer(config, clock=_clock(3)).run()

    text = config.llms_txt.read_text(encoding="utf-8")
    assert report.llms_updated is True
    assert text.startswith("# GravityKit Hooks\n\n## Statistics (Auto-Updated)")
    assert "- **Total Hooks:** 4" in text
    assert "- **Products:** 2" in text


def test_missing_llms_txt_is_skipped(docs_builder) -> None:
    config = _build_site(docs_builder)
    config.llms_txt.unlink()

    report = Enhancer(config, clock=_clock(3)).run()

    assert report.llms_updated is False
    assert not config.llms_txt.exists()


def test_duplicate_front_matter_ids_fall_back_to_file_name(docs_builder) -> None:
    docs_builder.write_config(CONFIG)
    page = "---\nid: dup\n---\n\n# Filter: gravityview/{name}\n"
    docs_builder.write(
        {
            "docs/hooks/gravityview-datatables/filters/alpha.md": page.format(name="alpha"),
            "docs/hooks/gravityview-datatables/filters/beta.md": page.format(name="beta"),
        }
    )

    catalog = Enhancer(docs_builder.config(), clock=_clock(3)).collect()

    assert [hook.id for hook in catalog.hooks] == ["dup", "beta"]
    assert catalog.hooks[1].url == "/docs/hooks/gravityview-datatables/filters/beta/"
