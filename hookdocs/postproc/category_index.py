"""Standalone (re)generation of the actions/filters index pages."""

from __future__ import annotations

from pathlib import Path
from typing import List

from ..generate.indexes import INDEX_FILE, hook_files
from ..generate.templates import TemplateRenderer
from ..logging import get_logger

KIND_DIRS = ("actions", "filters")
_POSITIONS = {"actions": 2, "filters": 3}


class CategoryIndexGenerator:
    """Writes a count-only index page into every hook-kind directory."""

    def __init__(self, output_root: Path, renderer: TemplateRenderer | None = None) -> None:
        self.output_root = output_root
        self.renderer = renderer or TemplateRenderer()
        self.logger = get_logger("indexes")

    def find_kind_dirs(self) -> List[Path]:
        found: List[Path] = []
        if not self.output_root.is_dir():
            return found
        pending = [self.output_root]
        while pending:
            directory = pending.pop(0)
            for child in sorted(entry for entry in directory.iterdir() if entry.is_dir()):
                if child.name in KIND_DIRS:
                    found.append(child)
                else:
                    pending.append(child)
        return sorted(found)

    def product_name(self, directory: Path) -> str:
        """Title-cased first path segment below the output root."""
        relative = directory.relative_to(self.output_root).parts
        if len(relative) < 2:
            return "Unknown Product"
        return " ".join(word[:1].upper() + word[1:] for word in relative[0].split("-"))

    def render(self, directory: Path) -> str:
        kind_plural = directory.name
        product_name = self.product_name(directory)
        if kind_plural == "actions":
            description = (
                f"Actions allow you to run custom code at specific points during {product_name}'s execution."
            )
        else:
            description = f"Filters allow you to modify data as it passes through {product_name}."
        return self.renderer.render(
            "category-index",
            position=_POSITIONS[kind_plural],
            title=kind_plural.capitalize(),
            product_name=product_name,
            kind_plural=kind_plural,
            description=description,
            count=len(hook_files(directory)),
        )

    def run(self) -> List[Path]:
        written: List[Path] = []
        for directory in self.find_kind_dirs():
            target = directory / INDEX_FILE
            target.write_text(self.render(directory), encoding="utf-8")
            self.logger.info("Updated %s", target)
            written.append(target)
        return written


__all__ = ["CategoryIndexGenerator", "KIND_DIRS"]
