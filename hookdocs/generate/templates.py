"""Jinja rendering for generated index pages."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")


class TemplateRenderer:
    """Renders markdown templates, preferring files from ``templates_dir``."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)

    def render(self, name: str, **context: Any) -> str:
        template = self._env.get_template(f"{name}.md.j2")
        return template.render(**context).rstrip() + "\n"

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir and templates_dir.resolve() != DEFAULT_TEMPLATES_DIR.resolve():
            directories.append(str(templates_dir))
        directories.append(str(DEFAULT_TEMPLATES_DIR))
        return Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )


__all__ = ["DEFAULT_TEMPLATES_DIR", "TemplateRenderer"]
