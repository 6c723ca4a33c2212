"""
CLI Test Suite

Tests for the yahtzee.py entry point.

Sections:
    1. Argument parsing
    2. High scores — list, stats, remove
    3. Dice style setting
"""
import pytest

from game_engine import Category
from score_history import HighScoreRecord, HighScoreStore
from yahtzee import main, parse_args


def _seed_store(path, *totals):
    store = HighScoreStore(path=path)
    for time, chance in enumerate(totals, start=1):
        scores = {cat: 0 for cat in Category}
        scores[Category.CHANCE] = chance
        store.append_high_score(HighScoreRecord(scores=scores, time=time))
    return store


# ── 1. Argument parsing ─────────────────────────────────────────────────────


def test_command_required():
    with pytest.raises(SystemExit):
        parse_args([])


def test_remove_needs_integer_time():
    with pytest.raises(SystemExit):
        parse_args(["remove", "yesterday"])


def test_dice_style_choices():
    assert parse_args(["dice-style"]).style is None
    assert parse_args(["dice-style", "numbers"]).style == "numbers"
    with pytest.raises(SystemExit):
        parse_args(["dice-style", "emoji"])


# ── 2. High scores ──────────────────────────────────────────────────────────


def test_scores_empty(tmp_path, capsys):
    assert main(["--scores-file", str(tmp_path / "s.json"), "scores"]) == 0
    assert "No high scores yet." in capsys.readouterr().out


def test_scores_listed_best_first(tmp_path, capsys):
    path = tmp_path / "s.json"
    _seed_store(path, 12, 30)
    main(["--scores-file", str(path), "scores"])
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0].startswith(" 1.   30")
    assert lines[1].startswith(" 2.   12")


def test_stats_lists_every_category(tmp_path, capsys):
    path = tmp_path / "s.json"
    _seed_store(path, 20)
    main(["--scores-file", str(path), "stats"])
    out = capsys.readouterr().out
    assert len(out.strip().splitlines()) == 13
    assert "Chance" in out


def test_remove_existing(tmp_path, capsys):
    path = tmp_path / "s.json"
    store = _seed_store(path, 12, 30)
    assert main(["--scores-file", str(path), "remove", "1"]) == 0
    assert [r.time for r in store.get_high_scores()] == [2]


def test_remove_missing(tmp_path, capsys):
    path = tmp_path / "s.json"
    _seed_store(path, 12)
    assert main(["--scores-file", str(path), "remove", "99"]) == 1
    assert "No high score with time 99" in capsys.readouterr().err


# ── 3. Dice style ───────────────────────────────────────────────────────────


def test_dice_style_default_and_set(tmp_path, capsys):
    settings = str(tmp_path / "settings.json")
    main(["--settings-file", settings, "dice-style"])
    assert capsys.readouterr().out.strip() == "dots"
    main(["--settings-file", settings, "dice-style", "numbers"])
    assert capsys.readouterr().out.strip() == "numbers"
    main(["--settings-file", settings, "dice-style"])
    assert capsys.readouterr().out.strip() == "numbers"
