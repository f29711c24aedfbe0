"""Index pages written next to the generated hook docs."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from ..markdown import front_matter_value, read_markdown, split_front_matter
from ..models import HOOK_KINDS, Category, Product
from .layout import product_route
from .templates import TemplateRenderer

INDEX_FILE = "index.md"


@dataclass(frozen=True)
class HookEntry:
    filename: str
    label: str


def hook_files(directory: Path) -> List[Path]:
    """Hook pages in ``directory`` (every ``*.md`` except the index), sorted."""
    if not directory.is_dir():
        return []
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix == ".md" and path.name != INDEX_FILE
    )


def hook_label(path: Path) -> Optional[str]:
    """``sidebar_label`` from a hook page's front matter."""
    try:
        front_matter, _ = split_front_matter(read_markdown(path))
    except (OSError, UnicodeDecodeError):
        return None
    return front_matter_value(front_matter, "sidebar_label")


def list_hooks(directory: Path) -> List[HookEntry]:
    entries = [
        HookEntry(filename=path.stem, label=hook_label(path) or path.stem)
        for path in hook_files(directory)
    ]
    return sorted(entries, key=lambda entry: (entry.label.casefold(), entry.label))


def write_product_index(
    renderer: TemplateRenderer,
    product: Product,
    output_dir: Path,
    *,
    repo_host: str = "github.com",
) -> Path:
    counts = {kind: len(hook_files(output_dir / f"{kind}s")) for kind in HOOK_KINDS}
    content = renderer.render(
        "product-index",
        label=product.label,
        repo=product.repo,
        repo_url=f"https://{repo_host}/{product.repo}",
        total_hooks=sum(counts.values()),
        action_count=counts["action"],
        filter_count=counts["filter"],
        has_actions=counts["action"] > 0,
        has_filters=counts["filter"] > 0,
    )
    target = output_dir / INDEX_FILE
    target.write_text(content, encoding="utf-8")
    return target


def write_kind_index(
    renderer: TemplateRenderer, product: Product, output_dir: Path, kind: str
) -> Optional[Path]:
    """Listing page for one hook kind; skipped when the kind has no hooks."""
    directory = output_dir / f"{kind}s"
    hooks = list_hooks(directory)
    if not hooks:
        return None
    content = renderer.render(
        f"{kind}s-index",
        label=product.label,
        count=len(hooks),
        hooks=hooks,
    )
    target = directory / INDEX_FILE
    target.write_text(content, encoding="utf-8")
    return target


def write_main_index(
    renderer: TemplateRenderer,
    output_root: Path,
    products: Sequence[Product],
    categories: Mapping[str, Category] | None,
) -> Path:
    """Landing page listing generated products, grouped by top-level category."""
    groups: List[Dict[str, object]] = []
    flat: List[Dict[str, str]] = []
    if categories:
        top_level = sorted(
            (category for category in categories.values() if not category.parent),
            key=lambda category: category.position,
        )
        for top in top_level:
            members = [
                _link(output_root, product, categories)
                for product in products
                if _top_category(product, categories) == top.id
            ]
            if members:
                groups.append({"label": top.label, "products": members})
        flat = [
            _link(output_root, product, categories)
            for product in products
            if _top_category(product, categories) is None
        ]
    else:
        flat = [_link(output_root, product, categories) for product in products]

    output_root.mkdir(parents=True, exist_ok=True)
    target = output_root / INDEX_FILE
    target.write_text(
        renderer.render("main-index", groups=groups, products=flat), encoding="utf-8"
    )
    return target


def _top_category(product: Product, categories: Mapping[str, Category]) -> Optional[str]:
    category = categories.get(product.category or "")
    if category is None:
        return None
    return category.parent or category.id


def _link(
    output_root: Path, product: Product, categories: Mapping[str, Category] | None
) -> Dict[str, str]:
    return {"label": product.label, "path": product_route(output_root, product, categories)}


__all__ = [
    "HookEntry",
    "INDEX_FILE",
    "hook_files",
    "hook_label",
    "list_hooks",
    "write_kind_index",
    "write_main_index",
    "write_product_index",
]
