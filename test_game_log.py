"""
Game Log Test Suite

Tests for the game log recording system.

Sections:
    1. Individual logging — roll, hold, score field verification
    2. Filtering — get_turn_entries, get_score_entries
    3. Clear — empties all entries
    4. Session integration — a played turn shows up in order
"""

from game_engine import Category
from game_log import GameLog
from game_session import GameSession

# ── 1. Individual logging ────────────────────────────────────────────────────


def test_log_roll():
    """log_roll creates an entry with correct fields."""
    log = GameLog()
    log.log_roll(turn=1, roll_number=1, dice_values=[1, 2, 3, 4, 5])
    assert len(log.entries) == 1
    e = log.entries[0]
    assert e.turn == 1
    assert e.event_type == "roll"
    assert e.dice_values == (1, 2, 3, 4, 5)
    assert e.roll_number == 1
    assert e.category is None
    assert e.score is None


def test_log_score():
    """log_score creates an entry with category and score."""
    log = GameLog()
    log.log_score(turn=3, category=Category.FULL_HOUSE, score=25, dice_values=[2, 2, 3, 3, 3])
    e = log.entries[0]
    assert e.event_type == "score"
    assert e.category == Category.FULL_HOUSE
    assert e.score == 25
    assert e.dice_values == (2, 2, 3, 3, 3)


def test_log_hold_change():
    """log_hold_change records held locations (sorted) and dice values."""
    log = GameLog()
    log.log_hold_change(turn=2, held_locations=["5", "1", "3"], dice_values=[5, 1, 5, 2, 5])
    e = log.entries[0]
    assert e.event_type == "hold"
    assert e.held_locations == ("1", "3", "5")
    assert e.dice_values == (5, 1, 5, 2, 5)


# ── 2. Filtering ─────────────────────────────────────────────────────────────


def test_get_turn_entries():
    log = GameLog()
    log.log_roll(turn=1, roll_number=1, dice_values=[1, 1, 1, 1, 1])
    log.log_score(turn=1, category=Category.ONES, score=5, dice_values=[1, 1, 1, 1, 1])
    log.log_roll(turn=2, roll_number=1, dice_values=[2, 2, 2, 2, 2])
    assert [e.event_type for e in log.get_turn_entries(1)] == ["roll", "score"]
    assert len(log.get_turn_entries(2)) == 1


def test_get_score_entries():
    log = GameLog()
    log.log_roll(turn=1, roll_number=1, dice_values=[1, 1, 1, 1, 1])
    log.log_score(turn=1, category=Category.ONES, score=5, dice_values=[1, 1, 1, 1, 1])
    scores = log.get_score_entries()
    assert len(scores) == 1
    assert scores[0].category == Category.ONES


# ── 3. Clear ─────────────────────────────────────────────────────────────────


def test_clear():
    log = GameLog()
    log.log_roll(turn=1, roll_number=1, dice_values=[1, 2, 3, 4, 5])
    log.clear()
    assert log.entries == []


# ── 4. Session integration ──────────────────────────────────────────────────


def test_session_turn_is_logged_in_order():
    session = GameSession()
    session.reroll()
    session.toggle_hold("1")
    session.reroll()
    session.place(Category.CHANCE)
    entries = session.game_log.get_turn_entries(1)
    assert [e.event_type for e in entries] == ["roll", "hold", "roll", "score"]
    assert [e.roll_number for e in entries if e.event_type == "roll"] == [1, 2]
    assert session.game_log.get_turn_entries(2) == []
