"""Tests for the fuzzy directory matcher."""

from __future__ import annotations

from pathlib import Path

from hookdocs.matcher import find_best_dir, list_dirs, normalize_slug, score_candidate


def test_normalize_slug_drops_case_and_separators() -> None:
    assert normalize_slug("GravityView-DataTables") == "gravityviewdatatables"
    assert normalize_slug("gravity_view.2") == "gravityview2"
    assert normalize_slug("") == ""


def test_sub_product_matches_its_own_directory() -> None:
    candidates = ["GravityView", "GravityView-DataTables"]

    assert find_best_dir("gravityview-datatables", candidates) == "GravityView-DataTables"


def test_exact_normalized_match_wins_over_longer_candidates() -> None:
    candidates = ["GravityView-DataTables", "gravity_view", "GravityView-Maps-Premium"]

    assert find_best_dir("gravityview", candidates) == "gravity_view"


def test_more_matched_tokens_beats_longer_name() -> None:
    candidates = ["gv-long-directory-name-for-something", "gv-maps-addon"]

    assert find_best_dir("gv-maps", candidates) == "gv-maps-addon"
    assert score_candidate("gv-maps", "gv-maps-addon") > score_candidate(
        "gv-maps", "gv-long-directory-name-for-something"
    )


def test_equal_token_matches_prefer_longer_names() -> None:
    assert score_candidate("gravityview-ratings", "gravityview") == 1000 + len("gravityview")
    assert find_best_dir("gravityview-ratings", ["gravityview", "gravityview-extra"]) == (
        "gravityview-extra"
    )


def test_find_best_dir_returns_none_without_candidates() -> None:
    assert find_best_dir("gravityview", []) is None


def test_list_dirs_skips_hidden_entries_and_files(tmp_path: Path) -> None:
    (tmp_path / "b-plugin").mkdir()
    (tmp_path / "a-plugin").mkdir()
    (tmp_path / ".cache").mkdir()
    (tmp_path / "readme.txt").write_text("x", encoding="utf-8")

    assert list_dirs(tmp_path) == ["a-plugin", "b-plugin"]
    assert list_dirs(tmp_path / "missing") == []
