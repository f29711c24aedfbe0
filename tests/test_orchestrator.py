"""Tests for hookdocs.orchestrator."""

from __future__ import annotations

import pytest

from hookdocs.config import ProductNotFoundError
from hookdocs.generate.regenerator import Regenerator
from hookdocs.git.auth import AuthMethod, AuthStrategy
from hookdocs.git.sync import GitUnavailableError
from hookdocs.models import SyncAction, SyncOutcome
from hookdocs.orchestrator import Orchestrator


class RecordingSynchronizer:
    """Test double that records sync_all invocations."""

    def __init__(self, config, strategy) -> None:
        self.config = config
        self.strategy = strategy
        self.calls: list[dict[str, object]] = []

    def sync_all(self, products, *, parallel, force):
        self.calls.append({"products": [p.id for p in products], "parallel": parallel, "force": force})
        outcomes = []
        for product in products:
            if product.id == "gravityview-datatables":
                outcomes.append(
                    SyncOutcome(product.id, product.repo, SyncAction.CLONE_FAILED, "repository not found")
                )
            else:
                outcomes.append(SyncOutcome(product.id, product.repo, SyncAction.UPDATED))
        return outcomes


def _orchestrator(config, *, git_check=None):
    created: list[RecordingSynchronizer] = []

    def factory(cfg, strategy):
        synchronizer = RecordingSynchronizer(cfg, strategy)
        created.append(synchronizer)
        return synchronizer

    orchestrator = Orchestrator(
        config,
        synchronizer_factory=factory,
        git_check=git_check or (lambda: "git version 2.43.0"),
        auth_detector=lambda: AuthStrategy(AuthMethod.SSH),
    )
    return orchestrator, created


def test_run_sync_summarizes_outcomes(docs_builder) -> None:
    docs_builder.write_config()
    orchestrator, created = _orchestrator(docs_builder.config())

    summary = orchestrator.run_sync(parallel=3, force=True)

    assert created[0].calls == [
        {"products": ["gravityview", "gravityview-datatables"], "parallel": 3, "force": True}
    ]
    assert created[0].strategy.method == AuthMethod.SSH
    assert [outcome.product_id for outcome in summary.updated] == ["gravityview"]
    assert [outcome.error for outcome in summary.failed] == ["repository not found"]
    assert summary.cloned == []
    assert summary.ok is False


def test_run_sync_single_product(docs_builder) -> None:
    docs_builder.write_config()
    orchestrator, created = _orchestrator(docs_builder.config())

    summary = orchestrator.run_sync(product_id="gravityview")

    assert created[0].calls[0]["products"] == ["gravityview"]
    assert summary.ok is True


def test_unknown_product_fails_before_git_check(docs_builder) -> None:
    docs_builder.write_config()
    checks = []
    orchestrator, created = _orchestrator(
        docs_builder.config(), git_check=lambda: checks.append("checked")
    )

    with pytest.raises(ProductNotFoundError):
        orchestrator.run_sync(product_id="datatables")

    assert checks == []
    assert created == []


def test_missing_git_aborts_sync(docs_builder) -> None:
    docs_builder.write_config()

    def git_check():
        raise GitUnavailableError("Git is not installed or not available in PATH")

    orchestrator, created = _orchestrator(docs_builder.config(), git_check=git_check)

    with pytest.raises(GitUnavailableError):
        orchestrator.run_sync()
    assert created == []


def test_run_generate_reports_skipped_products_after_fatal_error(docs_builder) -> None:
    docs_builder.write_config()
    config = docs_builder.config()
    (config.repos_dir / "GravityView").mkdir(parents=True)

    def runner(args, cwd):
        raise FileNotFoundError(args[0])

    orchestrator = Orchestrator(config, regenerator=Regenerator(config, runner=runner))

    summary = orchestrator.run_generate()

    assert summary.requested == 2
    assert summary.skipped == 1
    assert len(summary.failed) == 1
    assert summary.ok is False


def test_run_generate_dry_run(docs_builder) -> None:
    docs_builder.write_config()
    config = docs_builder.config()
    (config.repos_dir / "GravityView").mkdir(parents=True)
    (config.repos_dir / "DataTables").mkdir(parents=True)

    summary = Orchestrator(config).run_generate(dry_run=True)

    assert [result.product_id for result in summary.dry_runs] == ["gravityview", "gravityview-datatables"]
    assert summary.ok is True
    assert not config.output_dir.exists()


def test_run_category_indexes(docs_builder) -> None:
    docs_builder.write_config()
    docs_builder.write({"docs/hooks/gravityview/actions/gv-init.md": "# Action: gv_init\n"})

    written = Orchestrator(docs_builder.config()).run_category_indexes()

    assert written == [docs_builder.path("docs/hooks/gravityview/actions/index.md").resolve()]


def test_match_directory_prefers_plugins_dir(docs_builder) -> None:
    docs_builder.write_config("plugins_dir: plugins\nproducts: []\n")
    for name in ("GravityView", "GravityView-DataTables", "gravityforms"):
        docs_builder.path(f"plugins/{name}").mkdir(parents=True)
    orchestrator = Orchestrator(docs_builder.config())

    assert orchestrator.match_directory("gravityview-datatables") == "GravityView-DataTables"
    assert orchestrator.match_directory("gravityview", docs_builder.path("plugins")) == "GravityView"
