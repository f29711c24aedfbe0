"""Pipeline orchestration for the sync/generate/enhance/indexes flows."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from .config import PipelineConfig
from .generate.regenerator import Regenerator
from .generate.templates import TemplateRenderer
from .git.auth import AuthStrategy, detect_auth_method
from .git.sync import DEFAULT_PARALLELISM, RepoSynchronizer, ensure_git_available
from .logging import get_logger
from .matcher import find_best_dir, list_dirs
from .models import GenerationAction, GenerationResult, SyncAction, SyncOutcome
from .postproc.category_index import CategoryIndexGenerator
from .postproc.enhancer import EnhancementReport, Enhancer


@dataclass
class SyncSummary:
    strategy: AuthStrategy
    outcomes: List[SyncOutcome] = field(default_factory=list)

    @property
    def cloned(self) -> List[SyncOutcome]:
        return [outcome for outcome in self.outcomes if outcome.action == SyncAction.CLONED]

    @property
    def updated(self) -> List[SyncOutcome]:
        return [outcome for outcome in self.outcomes if outcome.action == SyncAction.UPDATED]

    @property
    def failed(self) -> List[SyncOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass
class GenerationSummary:
    results: List[GenerationResult] = field(default_factory=list)
    requested: int = 0

    @property
    def generated(self) -> List[GenerationResult]:
        return [result for result in self.results if result.action == GenerationAction.GENERATED]

    @property
    def dry_runs(self) -> List[GenerationResult]:
        return [result for result in self.results if result.action == GenerationAction.DRY_RUN]

    @property
    def failed(self) -> List[GenerationResult]:
        return [result for result in self.results if not result.ok]

    @property
    def skipped(self) -> int:
        """Products never attempted because a fatal failure ended the run."""
        return self.requested - len(self.results)

    @property
    def ok(self) -> bool:
        return not self.failed


class Orchestrator:
    """Coordinates the pipeline stages for one configuration."""

    def __init__(
        self,
        config: PipelineConfig,
        *,
        synchronizer_factory: Callable[[PipelineConfig, AuthStrategy], RepoSynchronizer] | None = None,
        regenerator: Regenerator | None = None,
        enhancer: Enhancer | None = None,
        git_check: Callable[[], object] | None = None,
        auth_detector: Callable[[], AuthStrategy] | None = None,
    ) -> None:
        self.config = config
        self._synchronizer_factory = synchronizer_factory or RepoSynchronizer
        self._regenerator = regenerator
        self._enhancer = enhancer
        self._git_check = git_check or ensure_git_available
        self._auth_detector = auth_detector or detect_auth_method
        self.logger = get_logger("orchestrator")

    def run_sync(
        self,
        *,
        product_id: str | None = None,
        force: bool = False,
        parallel: int = DEFAULT_PARALLELISM,
    ) -> SyncSummary:
        """Clone or update the selected product repositories.

        Raises ProductNotFoundError for unknown ids and GitUnavailableError
        when git cannot run; per-repository failures land in the summary.
        """
        products = self.config.select_products(product_id)
        self.logger.info("Loaded %d products", len(self.config.products))
        banner = self._git_check()
        self.logger.debug("Using %s", banner)

        strategy = self._auth_detector()
        self.logger.info("Authentication: %s", strategy.describe())

        synchronizer = self._synchronizer_factory(self.config, strategy)
        self.logger.info("Processing %d repositories (parallel: %d)", len(products), parallel)
        outcomes = synchronizer.sync_all(products, parallel=parallel, force=force)
        return SyncSummary(strategy=strategy, outcomes=outcomes)

    def run_generate(
        self, *, product_id: str | None = None, dry_run: bool = False
    ) -> GenerationSummary:
        products = self.config.select_products(product_id)
        if dry_run:
            self.logger.warning("Dry run: no files will be created or modified")
        regenerator = self._regenerator or Regenerator(
            self.config, renderer=TemplateRenderer(self.config.templates_dir)
        )
        results = regenerator.generate_all(products, dry_run=dry_run)
        return GenerationSummary(results=results, requested=len(products))

    def run_enhance(self) -> EnhancementReport:
        enhancer = self._enhancer or Enhancer(self.config)
        return enhancer.run()

    def run_category_indexes(self) -> List[Path]:
        generator = CategoryIndexGenerator(
            self.config.output_dir, TemplateRenderer(self.config.templates_dir)
        )
        return generator.run()

    def match_directory(self, product_id: str, directory: Path | None = None) -> Optional[str]:
        """Directory name the matcher picks for ``product_id`` under ``directory``."""
        root = directory or self.config.plugins_dir or self.config.repos_dir
        return find_best_dir(product_id, list_dirs(root))


__all__ = ["GenerationSummary", "Orchestrator", "SyncSummary"]
