"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

import pytest

from hookdocs.cli import _build_parser, main


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "sync"])
    assert args.verbose is True
    assert args.command == "sync"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "-v"])
    assert args.verbose is True
    assert args.command == "generate"


def test_cli_sync_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(["sync", "--force", "-p", "gravityview", "-j", "8"])
    assert args.force is True
    assert args.product == "gravityview"
    assert args.parallel == 8
    assert args.list is False


def test_cli_sync_defaults_to_four_parallel_jobs() -> None:
    args = _build_parser().parse_args(["sync"])
    assert args.parallel == 4
    assert args.force is False


def test_cli_rejects_non_positive_parallelism() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["sync", "--parallel", "0"])


def test_cli_accepts_dry_run_flag() -> None:
    args = _build_parser().parse_args(["generate", "--dry-run", "--product", "gravityview"])
    assert args.dry_run is True
    assert args.product == "gravityview"


def test_cli_match_arguments() -> None:
    args = _build_parser().parse_args(["match", "gravityview-datatables", "--dir", "/srv/plugins"])
    assert args.product_id == "gravityview-datatables"
    assert str(args.dir) == "/srv/plugins"


def test_main_lists_products(docs_builder, capsys) -> None:
    docs_builder.write_config()

    main(["--config", str(docs_builder.path()), "sync", "--list"])

    out = capsys.readouterr().out
    assert "gravityview -> GravityKit/GravityView (GravityView)" in out
    assert "gravityview-datatables -> GravityKit/DataTables (DataTables)" in out


def test_main_reports_missing_config(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(tmp_path), "generate"])

    assert excinfo.value.code == 1
    assert "Failed to load configuration" in capsys.readouterr().err


def test_main_suggests_similar_products(docs_builder, capsys) -> None:
    docs_builder.write_config()

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(docs_builder.path()), "generate", "--product", "datatables"])

    err = capsys.readouterr().err
    assert excinfo.value.code == 1
    assert "No product found with ID: datatables" in err
    assert "Did you mean one of these?" in err
    assert "    gravityview-datatables" in err


def test_main_generate_dry_run(docs_builder, capsys) -> None:
    docs_builder.write_config()
    docs_builder.path("repos/GravityView").mkdir(parents=True)

    main(["--config", str(docs_builder.path()), "generate", "-n", "-p", "gravityview"])

    out = capsys.readouterr().out
    assert "Would generate: 1" in out
    assert "    gravityview: " in out


def test_main_generate_exits_non_zero_on_failure(docs_builder, capsys) -> None:
    docs_builder.write_config()

    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(docs_builder.path()), "generate", "--dry-run"])

    assert excinfo.value.code == 1
    assert "Repository not cloned" in capsys.readouterr().out


def test_main_indexes(docs_builder, capsys) -> None:
    docs_builder.write_config()
    docs_builder.write({"docs/hooks/gravityview/filters/gv-output.md": "# Filter: gv/output\n"})

    main(["--config", str(docs_builder.path()), "indexes"])

    assert "Updated 1 index files." in capsys.readouterr().out


def test_main_enhance(docs_builder, capsys) -> None:
    docs_builder.write_config()
    docs_builder.hook_page("docs/hooks/gravityview", "action", "gravityview/loaded")

    main(["--config", str(docs_builder.path()), "enhance"])

    out = capsys.readouterr().out
    assert "Catalogued 1 hooks (1 actions, 0 filters) across 1 products" in out
    assert "JSON files written: 4" in out
    assert "Hook pages enhanced with usage examples: 1" in out


def test_main_match(docs_builder, capsys) -> None:
    docs_builder.write_config()
    docs_builder.path("repos/GravityView").mkdir(parents=True)
    docs_builder.path("repos/GravityView-DataTables").mkdir(parents=True)

    main(["--config", str(docs_builder.path()), "match", "gravityview-datatables"])

    assert capsys.readouterr().out.strip() == "GravityView-DataTables"
