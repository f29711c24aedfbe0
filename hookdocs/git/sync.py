"""Clone or update product repositories."""

from __future__ import annotations

import os
import shutil
import subprocess
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from ..config import PipelineConfig
from ..logging import get_logger
from ..models import Product, SyncAction, SyncOutcome
from .auth import AuthStrategy, _default_runner, clone_url

DEFAULT_PARALLELISM = 4

CommandRunner = Callable[..., "subprocess.CompletedProcess[str]"]


class GitUnavailableError(RuntimeError):
    """Raised when the git client cannot be executed."""


def ensure_git_available(runner: CommandRunner | None = None) -> str:
    """Return the `git --version` banner or raise GitUnavailableError."""
    run = runner or _default_runner
    try:
        completed = run(["git", "--version"])
    except OSError as exc:
        raise GitUnavailableError("Git is not installed or not available in PATH") from exc
    if completed.returncode != 0:
        raise GitUnavailableError("Git is not installed or not available in PATH")
    return completed.stdout.strip()


class RepoSynchronizer:
    """Keeps one shallow checkout per configured repository.

    Updates always fetch and hard-reset to the branch tip: local edits inside
    a checkout are discarded so every run scans exactly what upstream has.
    """

    def __init__(
        self,
        config: PipelineConfig,
        strategy: AuthStrategy,
        runner: CommandRunner | None = None,
    ) -> None:
        self.config = config
        self.strategy = strategy
        self._runner = runner or _default_runner
        self.logger = get_logger("sync")

    def sync(self, product: Product, *, force: bool = False) -> SyncOutcome:
        target = self.config.checkout_dir(product)
        branch = self.config.branch_for(product)
        exists = (target / ".git").exists()

        if exists and not force:
            return self._update(product, target, branch)

        if target.exists():
            if exists:
                self.logger.warning("Force mode: deleting existing %s", target.name)
            else:
                self.logger.debug("Removing partial checkout %s", target)
            try:
                _remove(target)
            except OSError as exc:
                self.logger.error("Could not remove %s: %s", target, exc)
                return SyncOutcome(product.id, product.repo, SyncAction.CLONE_FAILED, str(exc))
        return self._clone(product, target, branch)

    def sync_all(
        self,
        products: Sequence[Product],
        *,
        parallel: int = DEFAULT_PARALLELISM,
        force: bool = False,
    ) -> List[SyncOutcome]:
        """Sync products in sequential batches of ``parallel`` concurrent jobs.

        Products sharing a checkout directory are synced once, through the
        first of them; the others receive a copy of that outcome. Outcomes
        come back in product order.
        """
        batch_size = max(1, int(parallel))
        self.config.repos_dir.mkdir(parents=True, exist_ok=True)

        owners: Dict[Path, Product] = {}
        for product in products:
            owners.setdefault(self.config.checkout_dir(product), product)
        checkouts = list(owners.items())

        results: Dict[Path, SyncOutcome] = {}
        for start in range(0, len(checkouts), batch_size):
            batch = checkouts[start : start + batch_size]
            with ThreadPoolExecutor(max_workers=len(batch)) as pool:
                synced = pool.map(lambda item: self.sync(item[1], force=force), batch)
                for (target, _), outcome in zip(batch, synced):
                    results[target] = outcome

        outcomes: List[SyncOutcome] = []
        for product in products:
            shared = results[self.config.checkout_dir(product)]
            if shared.product_id != product.id:
                self.logger.debug(
                    "%s shares the %s checkout with %s", product.id, shared.repo, shared.product_id
                )
                shared = replace(shared, product_id=product.id, repo=product.repo)
            outcomes.append(shared)
        return outcomes

    # ------------------------------------------------------------------
    # Internals

    def _clone(self, product: Product, target: Path, branch: str) -> SyncOutcome:
        url = clone_url(product.repo, self.strategy, host=self.config.repo_host)
        self.logger.info("Cloning %s (%s) -> %s", product.repo, branch, target.name)
        args = [
            "git",
            "clone",
            "--depth",
            "1",
            "--single-branch",
            "--branch",
            branch,
            url,
            str(target),
        ]
        error = self._run(args)
        if error is not None:
            return SyncOutcome(product.id, product.repo, SyncAction.CLONE_FAILED, error)
        return SyncOutcome(product.id, product.repo, SyncAction.CLONED)

    def _update(self, product: Product, target: Path, branch: str) -> SyncOutcome:
        self.logger.info("Updating %s -> %s", product.repo, target.name)
        error = self._run(["git", "fetch", "--depth", "1", "origin", branch], cwd=target)
        if error is None:
            error = self._run(["git", "reset", "--hard", "FETCH_HEAD"], cwd=target)
        if error is not None:
            return SyncOutcome(product.id, product.repo, SyncAction.UPDATE_FAILED, error)
        return SyncOutcome(product.id, product.repo, SyncAction.UPDATED)

    def _run(self, args: Iterable[str], *, cwd: Optional[Path] = None) -> Optional[str]:
        """Run a git command; return the failure text or None on success."""
        command = list(args)
        try:
            completed = self._runner(
                command,
                cwd=str(cwd) if cwd is not None else None,
                env=self._environment(),
            )
        except OSError as exc:
            return self.strategy.redact(str(exc))
        if completed.returncode == 0:
            return None
        detail = (completed.stderr or "").strip() or f"{command[1]} exited with {completed.returncode}"
        return self.strategy.redact(detail)

    @staticmethod
    def _environment() -> Mapping[str, str]:
        env = os.environ.copy()
        env.setdefault("GIT_TERMINAL_PROMPT", "0")
        return env


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


__all__ = ["DEFAULT_PARALLELISM", "GitUnavailableError", "RepoSynchronizer", "ensure_git_available"]
