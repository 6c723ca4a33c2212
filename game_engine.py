"""
Yahtzee Game Engine - Pure game logic without GUI dependencies

This module holds the dice, the category evaluator, the score board and the
turn state machine. Nothing here knows about rendering or persistence, so it
can be unit tested without a front end.
"""
from __future__ import annotations

import random
import threading
from collections import Counter
from dataclasses import dataclass
from enum import Enum

HAND_SIZE = 5
UPPER_BONUS_THRESHOLD = 63
UPPER_BONUS = 35


class Category(Enum):
    """Yahtzee score categories"""
    ONES = "Ones"
    TWOS = "Twos"
    THREES = "Threes"
    FOURS = "Fours"
    FIVES = "Fives"
    SIXES = "Sixes"
    THREE_OF_KIND = "3 of a Kind"
    FOUR_OF_KIND = "4 of a Kind"
    FULL_HOUSE = "Full House"
    SMALL_STRAIGHT = "Small Straight"
    LARGE_STRAIGHT = "Large Straight"
    YAHTZEE = "Yahtzee"
    CHANCE = "Chance"


UPPER_CATEGORIES = (Category.ONES, Category.TWOS, Category.THREES,
                    Category.FOURS, Category.FIVES, Category.SIXES)
LOWER_CATEGORIES = (Category.THREE_OF_KIND, Category.FOUR_OF_KIND,
                    Category.FULL_HOUSE, Category.SMALL_STRAIGHT,
                    Category.LARGE_STRAIGHT, Category.YAHTZEE, Category.CHANCE)

_UPPER_FACE = {cat: face for face, cat in enumerate(UPPER_CATEGORIES, start=1)}


class InvalidHandSize(ValueError):
    """A hand was built with something other than five dice."""


# ══════════════════════════════════════════════════════════════════════════════
# Dice
# ══════════════════════════════════════════════════════════════════════════════

@dataclass(eq=False)
class Die:
    """A single six-sided die.

    `location` identifies the die for holding; two dice can show the same
    value, so holds are tracked by location rather than by value.
    """
    location: str
    value: int = 0  # 0 = not rolled yet

    def roll(self) -> int:
        """Give the die a new random value in 1-6 and return it."""
        self.value = random.randint(1, 6)
        return self.value

    def clear(self) -> None:
        """Put the die back in the unrolled state."""
        self.value = 0


class Hand:
    """The five dice in play, in a fixed display order."""

    def __init__(self, dice=None):
        if dice is None:
            dice = [Die(location=str(i)) for i in range(1, HAND_SIZE + 1)]
        dice = tuple(dice)
        if len(dice) != HAND_SIZE:
            raise InvalidHandSize(f"a hand holds {HAND_SIZE} dice, got {len(dice)}")
        if len({die.location for die in dice}) != HAND_SIZE:
            raise InvalidHandSize("dice in a hand need distinct locations")
        self.dice = dice

    @classmethod
    def of(cls, *values):
        """Build a hand showing the given values (handy for tests and previews)."""
        return cls(Die(location=str(i), value=v) for i, v in enumerate(values, start=1))

    def __len__(self):
        return len(self.dice)

    def __iter__(self):
        return iter(self.dice)

    def __getitem__(self, index):
        return self.dice[index]

    @property
    def values(self) -> tuple[int, ...]:
        return tuple(die.value for die in self.dice)

    @property
    def locations(self) -> tuple[str, ...]:
        return tuple(die.location for die in self.dice)

    @property
    def is_rolled(self) -> bool:
        """True once every die shows a face."""
        return all(die.value != 0 for die in self.dice)

    def get(self, location):
        """Return the die at `location`, or None."""
        for die in self.dice:
            if die.location == location:
                return die
        return None

    def reroll(self, held=()) -> None:
        """
        Roll every die whose location is not in `held`.

        Each die is rolled on its own thread; all of them are joined before
        this returns, so callers never see a partly rerolled hand.

        Args:
            held: Iterable of die locations to leave untouched
        """
        held = set(held)
        threads = [threading.Thread(target=die.roll)
                   for die in self.dice if die.location not in held]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    def clear(self) -> None:
        """Reset all dice to the unrolled state."""
        for die in self.dice:
            die.clear()


# ══════════════════════════════════════════════════════════════════════════════
# Category evaluator
# ══════════════════════════════════════════════════════════════════════════════

def count_values(dice):
    """
    Count occurrences of each rolled die value

    Works with any object that has a .value attribute. Unrolled dice
    (value 0) are not counted.

    Args:
        dice: Iterable of dice objects

    Returns:
        Counter object with die values as keys
    """
    return Counter(die.value for die in dice if die.value != 0)


def _has_n_of_kind(dice, n):
    counts = count_values(dice)
    return bool(counts) and max(counts.values()) >= n


def can_get_three_of_kind(dice):
    """True if at least three dice show the same value."""
    return _has_n_of_kind(dice, 3)


def can_get_four_of_kind(dice):
    """True if at least four dice show the same value."""
    return _has_n_of_kind(dice, 4)


def can_get_full_house(dice):
    """
    Check if dice form a full house (3 of one value, 2 of another)

    A Yahtzee is not a full house: the two groups must be distinct values.
    """
    counts = count_values(dice)
    return sorted(counts.values(), reverse=True) == [3, 2]


def can_get_small_straight(dice):
    """
    Check if dice contain a small straight (4 consecutive values)

    Args:
        dice: Iterable of dice objects

    Returns:
        True if the distinct values contain 1-2-3-4, 2-3-4-5 or 3-4-5-6
    """
    values = set(die.value for die in dice)
    small_straights = [{1, 2, 3, 4}, {2, 3, 4, 5}, {3, 4, 5, 6}]
    return any(straight.issubset(values) for straight in small_straights)


def can_get_large_straight(dice):
    """
    Check if dice form a large straight (5 consecutive values)

    Args:
        dice: Iterable of dice objects

    Returns:
        True if the distinct values are exactly 1-5 or 2-6
    """
    values = set(die.value for die in dice)
    large_straights = [{1, 2, 3, 4, 5}, {2, 3, 4, 5, 6}]
    return any(straight == values for straight in large_straights)


def can_get_yahtzee(dice):
    """True if all five dice share the same rolled value."""
    return _has_n_of_kind(dice, HAND_SIZE)


def calculate_score(category, dice):
    """
    Calculate the score a category would award for the given dice

    Placing is always legal on an open category; a category whose pattern
    is not present simply scores 0.

    Args:
        category: Category enum value
        dice: Iterable of dice objects

    Returns:
        Integer score for the category (0 if doesn't qualify)
    """
    dice = list(dice)
    total = sum(die.value for die in dice)

    # Upper section - sum of matching dice
    if category in _UPPER_FACE:
        face = _UPPER_FACE[category]
        return count_values(dice)[face] * face

    elif category == Category.THREE_OF_KIND:
        return total if can_get_three_of_kind(dice) else 0

    elif category == Category.FOUR_OF_KIND:
        return total if can_get_four_of_kind(dice) else 0

    elif category == Category.FULL_HOUSE:
        return 25 if can_get_full_house(dice) else 0

    elif category == Category.SMALL_STRAIGHT:
        return 30 if can_get_small_straight(dice) else 0

    elif category == Category.LARGE_STRAIGHT:
        return 40 if can_get_large_straight(dice) else 0

    elif category == Category.YAHTZEE:
        return 50 if can_get_yahtzee(dice) else 0

    elif category == Category.CHANCE:
        return total

    return 0


_PREDICATES = {
    Category.THREE_OF_KIND: can_get_three_of_kind,
    Category.FOUR_OF_KIND: can_get_four_of_kind,
    Category.FULL_HOUSE: can_get_full_house,
    Category.SMALL_STRAIGHT: can_get_small_straight,
    Category.LARGE_STRAIGHT: can_get_large_straight,
    Category.YAHTZEE: can_get_yahtzee,
}


def can_get(category, dice):
    """Whether `category` is achievable with these dice right now.

    Pattern categories use their predicate; upper categories and Chance
    count as achievable when they would score anything at all.
    """
    predicate = _PREDICATES.get(category)
    if predicate is not None:
        return predicate(dice)
    return calculate_score(category, dice) > 0


def potential_scores(dice, board):
    """Return {category: score} for every category still open on `board`."""
    dice = list(dice)
    return {cat: calculate_score(cat, dice) for cat in board.open_categories()}


def upper_section_hints(dice):
    """Rank up to three face values by how many dice show them.

    Ties go to the higher face. Used to highlight the most promising
    upper-section boxes.
    """
    counts = count_values(dice)
    ranked = sorted(counts.items(), key=lambda item: (item[1], item[0]), reverse=True)
    return [face for face, _ in ranked[:3]]


# ══════════════════════════════════════════════════════════════════════════════
# Score board
# ══════════════════════════════════════════════════════════════════════════════

class ScoreBoard:
    """Manages the Yahtzee score board"""

    def __init__(self):
        """Initialize an empty score board"""
        # None = not filled
        self.scores = {category: None for category in Category}

    def is_filled(self, category):
        """Check if a category has been filled"""
        return self.scores[category] is not None

    def score_for(self, category):
        """Recorded score for a category, or None when it is still open"""
        return self.scores[category]

    def open_categories(self):
        """Categories that can still be placed, in board order"""
        return [cat for cat in Category if not self.is_filled(cat)]

    def record(self, category, dice):
        """Score `dice` into `category`.

        Returns False and leaves the board alone if the category was already
        recorded. This is the only way a score gets onto the board.
        """
        if self.is_filled(category):
            return False
        self.scores[category] = calculate_score(category, dice)
        return True

    def reset(self):
        """Clear every recorded score for a new game"""
        for category in Category:
            self.scores[category] = None

    @property
    def small_score(self):
        """Total for the upper section (Ones through Sixes)"""
        return sum(self.scores[cat] for cat in UPPER_CATEGORIES if self.scores[cat] is not None)

    @property
    def large_score(self):
        """Total for the lower section"""
        return sum(self.scores[cat] for cat in LOWER_CATEGORIES if self.scores[cat] is not None)

    @property
    def has_bonus(self):
        return self.small_score >= UPPER_BONUS_THRESHOLD

    @property
    def upper_bonus(self):
        """35 points if the upper section reaches 63"""
        return UPPER_BONUS if self.has_bonus else 0

    @property
    def total_score(self):
        """Grand total including bonus"""
        return self.small_score + self.large_score + self.upper_bonus

    @property
    def is_game_over(self):
        """Check if all categories are filled"""
        return all(score is not None for score in self.scores.values())

    def as_dict(self):
        """Recorded scores keyed by category name (open categories omitted)"""
        return {cat.value: score for cat, score in self.scores.items() if score is not None}


# ══════════════════════════════════════════════════════════════════════════════
# Turn state machine
# ══════════════════════════════════════════════════════════════════════════════

class TurnState(Enum):
    ROLL_ONE = "RollOne"
    ROLL_TWO = "RollTwo"
    ROLL_THREE = "RollThree"
    STOP = "Stop"


_NEXT_STATE = {
    TurnState.ROLL_ONE: TurnState.ROLL_TWO,
    TurnState.ROLL_TWO: TurnState.ROLL_THREE,
    TurnState.ROLL_THREE: TurnState.STOP,
}


class TurnStateMachine:
    """Tracks how many rolls are left in the current turn.

    STOP is sticky: only reset_turn() (a category being placed) starts the
    next turn.
    """

    def __init__(self):
        self.state = TurnState.ROLL_ONE

    @property
    def can_roll(self) -> bool:
        return self.state != TurnState.STOP

    def advance(self) -> bool:
        """Move one step forward after a reroll. Returns False in STOP."""
        next_state = _NEXT_STATE.get(self.state)
        if next_state is None:
            return False
        self.state = next_state
        return True

    def reset_turn(self) -> None:
        self.state = TurnState.ROLL_ONE
