"""Post-process generated hook docs into JSON databases for LLM consumption."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple

from ..config import PipelineConfig
from ..generate.indexes import hook_files
from ..generate.layout import product_output_dir, product_route
from ..logging import get_logger
from ..markdown import read_markdown
from ..models import HOOK_KINDS, HookRecord, Product
from .examples import example_code, has_example, insert_example
from .hook_parser import ensure_unique_ids, link_related, parse_hook_file
from .stats import StatisticsSection

CATALOG_VERSION = "1.0"

PageKey = Tuple[str, str, str]


@dataclass
class ProductHooks:
    id: str
    label: str
    repo: str
    actions: List[str] = field(default_factory=list)
    filters: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.actions) + len(self.filters)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "repo": self.repo,
            "actions": list(self.actions),
            "filters": list(self.filters),
        }


@dataclass
class HookCatalog:
    """Every parsed hook across all products, in config and file order."""

    generated: str
    products: Dict[str, ProductHooks] = field(default_factory=dict)
    hooks: List[HookRecord] = field(default_factory=list)
    pages: Dict[PageKey, Path] = field(default_factory=dict)

    @property
    def stats(self) -> Dict[str, int]:
        actions = sum(1 for hook in self.hooks if hook.kind == "action")
        filters = sum(1 for hook in self.hooks if hook.kind == "filter")
        return {
            "totalHooks": actions + filters,
            "totalActions": actions,
            "totalFilters": filters,
            "productCount": len(self.products),
        }

    def hooks_for(self, product_id: str) -> List[HookRecord]:
        return [hook for hook in self.hooks if hook.product == product_id]


@dataclass
class EnhancementReport:
    catalog: HookCatalog
    written: List[Path]
    enhanced: int
    llms_updated: bool


class Enhancer:
    """Builds the hook catalog, writes its JSON projections and adds usage examples."""

    def __init__(
        self,
        config: PipelineConfig,
        *,
        clock: Callable[[], datetime] | None = None,
        statistics: StatisticsSection | None = None,
    ) -> None:
        self.config = config
        self._clock = clock or (lambda: datetime.now(UTC))
        self.statistics = statistics or StatisticsSection()
        self.logger = get_logger("enhance")

    def run(self) -> EnhancementReport:
        catalog = self.collect()
        self.logger.info(
            "Found %d hooks across %d products", len(catalog.hooks), len(catalog.products)
        )
        written = self.write_outputs(catalog)
        enhanced = self.enhance_pages(catalog)
        self.logger.info("Enhanced %d hook files with usage examples", enhanced)
        llms_updated = self.update_llms_txt(catalog)
        return EnhancementReport(catalog, written, enhanced, llms_updated)

    def collect(self) -> HookCatalog:
        catalog = HookCatalog(generated=_timestamp(self._clock()))
        for product in self.config.products:
            product_dir = product_output_dir(
                self.config.output_dir, product, self.config.categories
            )
            if not product_dir.is_dir():
                continue
            summary = ProductHooks(id=product.id, label=product.label, repo=product.repo)
            for kind in HOOK_KINDS:
                records, paths = self._parse_kind(product, product_dir / f"{kind}s", kind)
                for record, path in zip(records, paths):
                    catalog.hooks.append(record)
                    catalog.pages[(record.product, record.kind, record.id)] = path
                    getattr(summary, f"{kind}s").append(record.name)
            if summary.total:
                catalog.products[product.id] = summary
        link_related(catalog.hooks)
        return catalog

    def write_outputs(self, catalog: HookCatalog) -> List[Path]:
        """Write every JSON projection; returns the files whose content changed."""
        api_dir = self.config.api_dir
        hooks_dir = api_dir / "hooks"
        hooks_dir.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []

        for product_id, summary in catalog.products.items():
            hooks = catalog.hooks_for(product_id)
            payload = {
                "generated": catalog.generated,
                "product": summary.to_dict(),
                "hooks": [hook.to_dict() for hook in hooks],
                "stats": {
                    "total": len(hooks),
                    "actions": len(summary.actions),
                    "filters": len(summary.filters),
                },
            }
            self._write(hooks_dir / f"{product_id}.json", payload, written)

        self._write(hooks_dir / "index.json", self.index_payload(catalog), written)
        self._write(api_dir / "hooks.json", self.full_payload(catalog), written)
        self._write(
            api_dir / "hooks-compact.json", self.compact_payload(catalog), written, compact=True
        )
        return written

    def index_payload(self, catalog: HookCatalog) -> Dict[str, Any]:
        """Product directory with counts only, cheap to fetch."""
        base = f"{self.config.api_route}/"
        return {
            "generated": catalog.generated,
            "version": CATALOG_VERSION,
            "baseUrl": base,
            "stats": catalog.stats,
            "products": [
                {
                    "id": product_id,
                    "label": summary.label,
                    "repo": summary.repo,
                    "actions": len(summary.actions),
                    "filters": len(summary.filters),
                    "total": summary.total,
                    "url": f"{base}{product_id}.json",
                }
                for product_id, summary in catalog.products.items()
            ],
        }

    def full_payload(self, catalog: HookCatalog) -> Dict[str, Any]:
        return {
            "generated": catalog.generated,
            "version": CATALOG_VERSION,
            "products": {
                product_id: summary.to_dict() for product_id, summary in catalog.products.items()
            },
            "hooks": [hook.to_dict() for hook in catalog.hooks],
            "stats": catalog.stats,
        }

    @staticmethod
    def compact_payload(catalog: HookCatalog) -> Dict[str, Any]:
        return {
            "generated": catalog.generated,
            "hooks": [hook.to_compact() for hook in catalog.hooks],
        }

    def enhance_pages(self, catalog: HookCatalog) -> int:
        enhanced = 0
        for hook in catalog.hooks:
            path = catalog.pages.get((hook.product, hook.kind, hook.id))
            if path is None or not path.is_file():
                continue
            text = read_markdown(path)
            if has_example(text):
                continue
            path.write_text(insert_example(text, hook), encoding="utf-8")
            enhanced += 1
        return enhanced

    def update_llms_txt(self, catalog: HookCatalog) -> bool:
        path = self.config.llms_txt
        if not path.is_file():
            self.logger.debug("No LLM context file at %s; skipping statistics", path)
            return False
        text = path.read_text(encoding="utf-8")
        updated = self.statistics.apply(text, catalog.stats, today=self._clock().date())
        if updated == text:
            return False
        path.write_text(updated, encoding="utf-8")
        self.logger.info("Updated statistics in %s", path.name)
        return True

    # ------------------------------------------------------------------
    # Internals

    def _parse_kind(
        self, product: Product, directory: Path, kind: str
    ) -> Tuple[List[HookRecord], List[Path]]:
        records: List[HookRecord] = []
        paths: List[Path] = []
        for path in hook_files(directory):
            try:
                record = parse_hook_file(path, product.id, kind)
            except (OSError, UnicodeDecodeError) as exc:
                self.logger.warning("Skipping unreadable hook page %s: %s", path, exc)
                continue
            if record is None:
                continue
            records.append(record)
            paths.append(path)

        ensure_unique_ids(records, [path.stem for path in paths])
        route = product_route(self.config.output_dir, product, self.config.categories)
        for record in records:
            record.url = f"{self.config.docs_route}/{route}/{kind}s/{record.id}/"
            if record.example is None:
                # Matches what enhance_pages inserts, so reruns serialize identically.
                record.example = example_code(record).strip()
        return records, paths

    def _write(
        self,
        path: Path,
        payload: Dict[str, Any],
        written: List[Path],
        *,
        compact: bool = False,
    ) -> None:
        if _same_content(path, payload):
            self.logger.debug("Unchanged: %s", path)
            return
        if compact:
            text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
        else:
            text = json.dumps(payload, ensure_ascii=False, indent=2)
        path.write_text(text + "\n", encoding="utf-8")
        written.append(path)
        self.logger.info("Wrote %s", path)


def _timestamp(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


def _same_content(path: Path, payload: Dict[str, Any]) -> bool:
    """True when ``path`` already holds ``payload`` apart from its timestamp."""
    if not path.is_file():
        return False
    try:
        existing = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return False
    if not isinstance(existing, dict):
        return False
    return _without_timestamp(existing) == _without_timestamp(payload)


def _without_timestamp(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if key != "generated"}


__all__ = ["EnhancementReport", "Enhancer", "HookCatalog", "ProductHooks"]
