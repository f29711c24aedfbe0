"""CLI entrypoints for hookdocs commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from .config import ConfigError, PipelineConfig, ProductNotFoundError, load_config
from .git.sync import DEFAULT_PARALLELISM, GitUnavailableError
from .logging import configure_logging
from .models import Product
from .orchestrator import GenerationSummary, Orchestrator, SyncSummary


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_product_option(parser: argparse.ArgumentParser, action: str) -> None:
    parser.add_argument(
        "-p",
        "--product",
        metavar="ID",
        help=f"{action} only the product with this exact ID.",
    )
    parser.add_argument(
        "-l",
        "--list",
        action="store_true",
        help="List all configured product IDs and exit.",
    )


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hookdocs",
        description="Aggregate hook documentation from a fleet of plugin repositories.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to repos-config.yml or its directory (defaults to the current directory).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser(
        "sync",
        help="Clone or update every product repository.",
    )
    _add_verbose_option(sync_parser, suppress_default=True)
    _add_product_option(sync_parser, "Clone/update")
    sync_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Delete existing checkouts and clone them again.",
    )
    sync_parser.add_argument(
        "-j",
        "--parallel",
        type=_positive_int,
        default=DEFAULT_PARALLELISM,
        help=f"Number of repositories processed concurrently (default: {DEFAULT_PARALLELISM}).",
    )

    generate_parser = subparsers.add_parser(
        "generate",
        help="Regenerate hook documentation from the checkouts.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_product_option(generate_parser, "Generate docs for")
    generate_parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Show input and output paths without changing any files.",
    )

    enhance_parser = subparsers.add_parser(
        "enhance",
        help="Build JSON hook databases and add usage examples for LLM consumption.",
    )
    _add_verbose_option(enhance_parser, suppress_default=True)

    indexes_parser = subparsers.add_parser(
        "indexes",
        help="Rewrite the actions/filters index pages across the output tree.",
    )
    _add_verbose_option(indexes_parser, suppress_default=True)

    match_parser = subparsers.add_parser(
        "match",
        help="Show which source directory a product ID resolves to.",
    )
    _add_verbose_option(match_parser, suppress_default=True)
    match_parser.add_argument("product_id", metavar="ID", help="Product ID to match.")
    match_parser.add_argument(
        "--dir",
        type=Path,
        default=None,
        help="Directory whose sub-directories are candidates (defaults to plugins_dir or repos_dir).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for hookdocs commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        parser.exit(1, f"Failed to load configuration: {exc}\n")

    orchestrator = Orchestrator(config)

    if getattr(args, "list", False):
        _print_products(config.products)
        return

    try:
        if args.command == "sync":
            summary = orchestrator.run_sync(
                product_id=args.product,
                force=bool(args.force),
                parallel=args.parallel,
            )
            _print_sync_summary(summary, config)
            if not summary.ok:
                parser.exit(1, "Some repositories failed. Check the errors above.\n")
        elif args.command == "generate":
            dry_run = bool(getattr(args, "dry_run", False))
            result = orchestrator.run_generate(product_id=args.product, dry_run=dry_run)
            _print_generation_summary(result)
            if not result.ok:
                parser.exit(1, "Some products failed. Check the errors above.\n")
        elif args.command == "enhance":
            report = orchestrator.run_enhance()
            stats = report.catalog.stats
            print(
                f"Catalogued {stats['totalHooks']} hooks "
                f"({stats['totalActions']} actions, {stats['totalFilters']} filters) "
                f"across {stats['productCount']} products"
            )
            print(f"JSON files written: {len(report.written)}")
            print(f"Hook pages enhanced with usage examples: {report.enhanced}")
            if report.llms_updated:
                print(f"Statistics updated in {_relativize(config.llms_txt)}")
        elif args.command == "indexes":
            written = orchestrator.run_category_indexes()
            print(f"Updated {len(written)} index files.")
        elif args.command == "match":
            matched = orchestrator.match_directory(args.product_id, args.dir)
            if matched is None:
                parser.exit(1, f"No candidate directory for {args.product_id}\n")
            print(matched)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except ProductNotFoundError as exc:
        message = f"{exc}\n"
        if exc.suggestions:
            message += "Did you mean one of these?\n"
            message += "".join(f"    {suggestion}\n" for suggestion in exc.suggestions)
        message += "Use --list to see all available product IDs.\n"
        parser.exit(1, message)
    except GitUnavailableError as exc:
        parser.exit(1, f"{exc}\n")


def _print_products(products: Sequence[Product]) -> None:
    print("Available product IDs:")
    for product in products:
        print(f"  {product.id} -> {product.repo} ({product.label})")


def _print_sync_summary(summary: SyncSummary, config: PipelineConfig) -> None:
    print("Summary")
    if summary.cloned:
        print(f"Cloned: {len(summary.cloned)}")
        for outcome in summary.cloned:
            print(f"    {outcome.repo}")
    if summary.updated:
        print(f"Updated: {len(summary.updated)}")
        for outcome in summary.updated:
            print(f"    {outcome.repo}")
    if summary.failed:
        print(f"Failed: {len(summary.failed)}")
        for outcome in summary.failed:
            print(f"    {outcome.repo}: {outcome.error}")
        print("You may need to configure SSH keys, run `gh auth login`, or export GH_TOKEN.")
    else:
        print(f"All repositories processed. Checkouts are in {_relativize(config.repos_dir)}")


def _print_generation_summary(summary: GenerationSummary) -> None:
    print("Summary")
    if summary.generated:
        print(f"Generated: {len(summary.generated)}")
        for result in summary.generated:
            print(f"    {result.product_id}")
    if summary.dry_runs:
        print(f"Would generate: {len(summary.dry_runs)}")
        for result in summary.dry_runs:
            print(f"    {result.product_id}: {result.input_dir} -> {result.output_dir}")
    if summary.failed:
        print(f"Failed: {len(summary.failed)}")
        for result in summary.failed:
            print(f"    {result.product_id}: {result.reason}")
    if summary.skipped:
        print(f"Skipped after fatal error: {summary.skipped}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
