"""Statistics block for the plain-text LLM context file."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Mapping


@dataclass
class StatisticsSection:
    """Keeps an auto-updated statistics section in llms.txt current."""

    HEADING = "## Statistics (Auto-Updated)"

    _EXISTING = re.compile(r"## Statistics \(Auto-Updated\).*?(?=\n##|\Z)", re.DOTALL)

    def render(self, stats: Mapping[str, int], *, today: date) -> str:
        lines = [
            self.HEADING,
            "",
            f"- **Total Hooks:** {stats.get('totalHooks', 0)}",
            f"- **Actions:** {stats.get('totalActions', 0)}",
            f"- **Filters:** {stats.get('totalFilters', 0)}",
            f"- **Products:** {stats.get('productCount', 0)}",
            f"- **Last Updated:** {today.isoformat()}",
        ]
        return "\n".join(lines) + "\n"

    def apply(self, text: str, stats: Mapping[str, int], *, today: date) -> str:
        """Replace the section if present, otherwise append it."""
        section = self.render(stats, today=today)
        if self.HEADING in text:
            return self._EXISTING.sub(lambda _: section, text, count=1)
        if not text.strip():
            return section
        return text.rstrip("\n") + "\n\n" + section


__all__ = ["StatisticsSection"]
