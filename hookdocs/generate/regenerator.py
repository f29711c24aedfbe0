"""Per-product hook documentation regeneration."""

from __future__ import annotations

import json
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..config import PipelineConfig, resolve_extraction_config
from ..logging import get_logger
from ..matcher import find_best_dir, list_dirs
from ..models import HOOK_KINDS, GenerationAction, GenerationResult, Product
from .indexes import INDEX_FILE, write_kind_index, write_main_index, write_product_index
from .layout import product_output_dir, write_category_structure
from .templates import TemplateRenderer

ToolRunner = Callable[..., int]

# Where the extraction tool leaves its markdown, relative to its output dir.
_GENERATED_LOCATIONS: Tuple[str, ...] = ("docs/hooks", "hooks")


class Regenerator:
    """Runs the extraction tool for each product and normalizes its output."""

    def __init__(
        self,
        config: PipelineConfig,
        *,
        renderer: TemplateRenderer | None = None,
        runner: ToolRunner | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer(config.templates_dir)
        self._runner = runner or self._default_runner
        self.logger = get_logger("generate")

    def generate_all(
        self, products: Sequence[Product], *, dry_run: bool = False
    ) -> List[GenerationResult]:
        """Regenerate products one at a time; a fatal result ends the run."""
        output_root = self.config.output_dir
        if not dry_run:
            output_root.mkdir(parents=True, exist_ok=True)
            if self.config.categories:
                write_category_structure(output_root, self.config.categories)

        results: List[GenerationResult] = []
        for product in products:
            result = self.generate(product, dry_run=dry_run)
            results.append(result)
            if result.fatal:
                self.logger.error("Stopping: %s", result.reason)
                break

        generated_ids = {
            result.product_id
            for result in results
            if result.ok and result.action == GenerationAction.GENERATED
        }
        if not dry_run and generated_ids:
            # Products generated by earlier runs stay listed.
            listed = [
                product
                for product in self.config.products
                if product.id in generated_ids or self._has_output(product)
            ]
            write_main_index(self.renderer, output_root, listed, self.config.categories)
        return results

    def generate(self, product: Product, *, dry_run: bool = False) -> GenerationResult:
        input_dir, reason = self.resolve_input_dir(product)
        if input_dir is None:
            return self._failed(product, reason)

        output_dir = product_output_dir(self.config.output_dir, product, self.config.categories)
        if dry_run:
            self.logger.info("[dry-run] Would generate %s", product.id)
            self.logger.info("  Input:  %s", self._display(input_dir))
            self.logger.info("  Output: %s", self._display(output_dir))
            return GenerationResult(
                product.id,
                ok=True,
                action=GenerationAction.DRY_RUN,
                input_dir=input_dir,
                output_dir=output_dir,
            )

        self.logger.info("=== %s (%s) ===", product.label, product.id)
        self.logger.info("Input:  %s", self._display(input_dir))
        self.logger.info("Output: %s", self._display(output_dir))

        with tempfile.TemporaryDirectory(prefix=f"hookdocs-{product.id}-") as work:
            work_dir = Path(work)
            (work_dir / "output").mkdir()
            tool_config = resolve_extraction_config(product, self.config.defaults, input_dir)
            (work_dir / self.config.extractor.config_name).write_text(
                json.dumps(tool_config, indent=2) + "\n", encoding="utf-8"
            )

            command = [self.config.extractor.command, *self.config.extractor.args]
            try:
                exit_code = self._runner(command, cwd=work_dir)
            except FileNotFoundError:
                return self._failed(
                    product,
                    f"{self.config.extractor.command} not found on PATH; install it before regenerating",
                    fatal=True,
                )
            except OSError as exc:
                return self._failed(product, str(exc))
            if exit_code != 0:
                return self._failed(product, f"Exit code {exit_code}")

            generated = self._locate_output(work_dir / "output")
            if generated is None:
                return self._failed(product, "No hooks documentation was generated")

            try:
                _install_tree(generated, output_dir)
                write_product_index(
                    self.renderer, product, output_dir, repo_host=self.config.repo_host
                )
                for kind in HOOK_KINDS:
                    write_kind_index(self.renderer, product, output_dir, kind)
            except OSError as exc:
                return self._failed(product, f"Could not write {self._display(output_dir)}: {exc}")

        return GenerationResult(
            product.id,
            ok=True,
            action=GenerationAction.GENERATED,
            input_dir=input_dir,
            output_dir=output_dir,
        )

    def resolve_input_dir(self, product: Product) -> Tuple[Optional[Path], str]:
        """Directory the extraction tool should scan, or ``(None, reason)``."""
        if product.source_dir is not None:
            base = product.source_dir
            if not base.is_dir():
                return None, f"Source directory not found: {base}"
        else:
            base = self.config.checkout_dir(product)
            if not base.is_dir():
                matched = self._match_plugin_dir(product)
                if matched is None:
                    return None, (
                        f"Repository not cloned. Run: hookdocs sync --product {product.id}"
                    )
                base = matched

        input_dir = base / product.src_dir if product.src_dir else base
        if not input_dir.is_dir():
            return None, f"Source directory not found: {input_dir}"
        return input_dir, ""

    # ------------------------------------------------------------------
    # Internals

    def _has_output(self, product: Product) -> bool:
        output_dir = product_output_dir(self.config.output_dir, product, self.config.categories)
        return (output_dir / INDEX_FILE).is_file()

    def _match_plugin_dir(self, product: Product) -> Optional[Path]:
        plugins_dir = self.config.plugins_dir
        if plugins_dir is None:
            return None
        matched = find_best_dir(product.id, list_dirs(plugins_dir))
        if matched is None:
            return None
        self.logger.debug("Matched %s to plugin directory %s", product.id, matched)
        return plugins_dir / matched

    @staticmethod
    def _locate_output(output_dir: Path) -> Optional[Path]:
        for relative in _GENERATED_LOCATIONS:
            candidate = output_dir / relative
            if candidate.is_dir():
                return candidate
        return None

    def _failed(self, product: Product, reason: str, *, fatal: bool = False) -> GenerationResult:
        self.logger.error("%s: %s", product.id, reason)
        return GenerationResult(
            product.id, ok=False, action=GenerationAction.FAILED, reason=reason, fatal=fatal
        )

    def _display(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.config.root))
        except ValueError:
            return str(path)

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> int:
        completed = subprocess.run(list(args), cwd=str(cwd), check=False)
        return completed.returncode


def _install_tree(generated: Path, output_dir: Path) -> None:
    """Replace ``output_dir`` with a copy of ``generated`` using lower-case kind dirs."""
    if output_dir.is_dir() and not output_dir.is_symlink():
        shutil.rmtree(output_dir)
    elif output_dir.exists() or output_dir.is_symlink():
        output_dir.unlink()
    output_dir.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(generated, output_dir)
    for kind in HOOK_KINDS:
        _lowercase_dir(output_dir, f"{kind.capitalize()}s")


def _lowercase_dir(parent: Path, name: str) -> None:
    source = parent / name
    target = parent / name.lower()
    if not source.is_dir() or source.name == target.name:
        return
    # Two-step rename keeps case-insensitive filesystems happy.
    staging = parent / f"_tmp_{name.lower()}"
    source.rename(staging)
    staging.rename(target)


__all__ = ["Regenerator"]
