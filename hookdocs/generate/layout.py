"""Output placement of product docs inside the category tree."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Mapping

from ..models import Category, Product

CATEGORY_FILE = "_category_.json"


def category_dir(output_root: Path, category: Category) -> Path:
    if category.parent:
        return output_root / category.parent / category.id
    return output_root / category.id


def product_output_dir(
    output_root: Path,
    product: Product,
    categories: Mapping[str, Category] | None,
) -> Path:
    """Final docs directory of ``product``; flat when it has no known category."""
    if not product.category or not categories:
        return output_root / product.id
    category = categories.get(product.category)
    if category is None:
        return output_root / product.id
    return category_dir(output_root, category) / product.id


def product_route(
    output_root: Path,
    product: Product,
    categories: Mapping[str, Category] | None,
) -> str:
    """Path of the product directory relative to the output root, posix style."""
    return product_output_dir(output_root, product, categories).relative_to(output_root).as_posix()


def category_payload(category: Category) -> Dict[str, object]:
    return {
        "label": category.label,
        "position": category.position,
        "collapsed": True,
        "collapsible": True,
    }


def write_category_structure(
    output_root: Path, categories: Mapping[str, Category]
) -> List[Path]:
    """Create every category directory with its sidebar descriptor."""
    written: List[Path] = []
    for category in categories.values():
        directory = category_dir(output_root, category)
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / CATEGORY_FILE
        target.write_text(json.dumps(category_payload(category), indent=2) + "\n", encoding="utf-8")
        written.append(target)
    return written


__all__ = [
    "CATEGORY_FILE",
    "category_dir",
    "category_payload",
    "product_output_dir",
    "product_route",
    "write_category_structure",
]
