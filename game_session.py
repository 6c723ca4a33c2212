"""
GameSession — one playable game of Yahtzee.

Composes the hand, the score board and the turn state machine, and is the
only object a front end needs to talk to. Rejected actions return False and
change nothing. When the last category is placed the finished game is handed
to the high-score store on a background writer thread.
"""
from __future__ import annotations

import logging
import queue
import threading
from typing import Callable

from game_engine import (
    Category,
    Hand,
    ScoreBoard,
    TurnState,
    TurnStateMachine,
    can_get,
    potential_scores,
    upper_section_hints,
)
from game_log import GameLog
from score_history import HighScoreRecord

logger = logging.getLogger(__name__)


class HighScoreWriter:
    """Feeds finished games to a high-score store from a daemon thread.

    Writes happen in submission order. flush() blocks until everything
    submitted so far has been written (or has failed and been logged).
    """

    def __init__(self, store) -> None:
        self._store = store
        self._queue: queue.Queue = queue.Queue()
        self._thread: threading.Thread | None = None
        self._start_lock = threading.Lock()

    def submit(self, record: HighScoreRecord) -> None:
        with self._start_lock:
            if self._thread is None:
                self._thread = threading.Thread(
                    target=self._run, daemon=True, name="highscore-writer"
                )
                self._thread.start()
        self._queue.put(record)

    def flush(self) -> None:
        self._queue.join()

    def _run(self) -> None:
        while True:
            record = self._queue.get()
            try:
                self._store.append_high_score(record)
            except Exception:
                logger.error("High score write failed", exc_info=True)
            finally:
                self._queue.task_done()


class GameSession:
    """Single-player game state plus the actions a front end can take.

    Front ends either poll the properties / snapshot() or register a
    callback with subscribe() to hear about every successful change.
    """

    def __init__(self, high_scores=None) -> None:
        """Create a fresh game.

        Args:
            high_scores: Optional store with an append_high_score(record)
                method. Finished games are written to it.
        """
        self.hand = Hand()
        self.held: set[str] = set()
        self.turn = TurnStateMachine()
        self.board = ScoreBoard()
        self.game_log = GameLog()

        self.rolling = False
        self.last_scored_category: Category | None = None

        self._lock = threading.Lock()
        self._observers: list[Callable[[GameSession], None]] = []
        self._high_score_emitted = False
        self._writer = HighScoreWriter(high_scores) if high_scores is not None else None

    # ── Properties ────────────────────────────────────────────────────────

    @property
    def state(self) -> TurnState:
        return self.turn.state

    @property
    def dice(self) -> tuple[int, ...]:
        """Current face values, in display order."""
        return self.hand.values

    @property
    def is_game_over(self) -> bool:
        return self.board.is_game_over

    @property
    def current_turn(self) -> int:
        """Turn number 1-13."""
        filled = sum(1 for cat in Category if self.board.is_filled(cat))
        return min(filled + 1, len(Category))

    @property
    def can_roll_now(self) -> bool:
        return not self.rolling and self.turn.can_roll and not self.is_game_over

    # ── Observers ─────────────────────────────────────────────────────────

    def subscribe(self, callback: Callable[[GameSession], None]) -> Callable[[], None]:
        """Call `callback(session)` after every successful change.

        Returns a function that removes the callback again.
        """
        with self._lock:
            self._observers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._observers:
                    self._observers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        with self._lock:
            observers = list(self._observers)
        for callback in observers:
            callback(self)

    # ── Actions ───────────────────────────────────────────────────────────

    def reroll(self) -> bool:
        """Roll every die that is not held, then use up one roll.

        Rejected in STOP, while another reroll is running, or once the game
        is over.
        """
        with self._lock:
            if self.rolling:
                logger.debug("Reroll rejected: roll already in progress")
                return False
            if not self.turn.can_roll:
                logger.debug("Reroll rejected: no rolls left this turn")
                return False
            if self.board.is_game_over:
                logger.debug("Reroll rejected: game is over")
                return False
            self.rolling = True
            held = set(self.held)

        try:
            self.hand.reroll(held)
        except BaseException:
            with self._lock:
                self.rolling = False
            raise

        with self._lock:
            self.turn.advance()
            self.rolling = False
            self.game_log.log_roll(
                turn=self.current_turn,
                roll_number=self._rolls_used(),
                dice_values=list(self.hand.values),
            )
        self._notify()
        return True

    def toggle_hold(self, location: str) -> bool:
        """Hold or release the die at `location`.

        Only rolled dice can be held.
        """
        with self._lock:
            if self.rolling or self.board.is_game_over:
                return False
            die = self.hand.get(location)
            if die is None or die.value == 0:
                logger.debug("Hold rejected for die %r", location)
                return False
            if location in self.held:
                self.held.discard(location)
            else:
                self.held.add(location)
            self.game_log.log_hold_change(
                turn=self.current_turn,
                held_locations=list(self.held),
                dice_values=list(self.hand.values),
            )
        self._notify()
        return True

    def place(self, category: Category) -> bool:
        """Score the current dice in `category` and start the next turn.

        Allowed at any point in the turn, including before the first roll
        (which scores 0). Rejected if the category is already filled or a
        reroll is running.
        """
        record = None
        with self._lock:
            if self.rolling:
                logger.debug("Place rejected: roll in progress")
                return False
            if self.board.is_filled(category):
                logger.debug("Place rejected: %s already scored", category.value)
                return False

            turn = self.current_turn
            dice_values = list(self.hand.values)
            self.board.record(category, self.hand)
            score = self.board.score_for(category)
            self.game_log.log_score(turn, category, score, dice_values)
            self.last_scored_category = category
            self._reset_turn()

            if self.board.is_game_over and not self._high_score_emitted:
                self._high_score_emitted = True
                record = HighScoreRecord.from_board(self.board)

        if record is not None:
            logger.info("Game over with %d points", record.total_score)
            if self._writer is not None:
                self._writer.submit(record)
        self._notify()
        return True

    def reset_game(self) -> bool:
        """Clear the board and start over.

        Waits for the previous game's high score to be written first.
        Rejected while a reroll is running.
        """
        if self._writer is not None:
            self._writer.flush()
        with self._lock:
            if self.rolling:
                return False
            self.board.reset()
            self.game_log.clear()
            self.last_scored_category = None
            self._high_score_emitted = False
            self._reset_turn()
        self._notify()
        return True

    def flush(self) -> None:
        """Block until pending high-score writes are done."""
        if self._writer is not None:
            self._writer.flush()

    # ── Queries ───────────────────────────────────────────────────────────

    def can_score_preview(self, category: Category) -> bool:
        """Whether to highlight `category` as achievable right now."""
        if self.board.is_filled(category) or self.rolling:
            return False
        if self.state == TurnState.ROLL_ONE:
            return False
        return can_get(category, self.hand)

    def last_turn_summary(self) -> tuple[str, int] | None:
        """Return (category_name, score) for the most recent placement, or None."""
        score_entries = self.game_log.get_score_entries()
        if not score_entries:
            return None
        last = score_entries[-1]
        return (last.category.value, last.score)

    def snapshot(self) -> dict:
        """Return a JSON-serializable dict of the whole game state."""
        potential = {}
        if self.hand.is_rolled and not self.is_game_over:
            potential = {cat.value: score
                         for cat, score in potential_scores(self.hand, self.board).items()}
        return {
            "dice": [{"location": d.location, "value": d.value, "held": d.location in self.held}
                     for d in self.hand],
            "held": [loc for loc in self.hand.locations if loc in self.held],
            "state": self.state.value,
            "rolling": self.rolling,
            "turn": self.current_turn,
            "scores": self.board.as_dict(),
            "potential_scores": potential,
            "upper_hints": upper_section_hints(self.hand),
            "small_score": self.board.small_score,
            "large_score": self.board.large_score,
            "upper_bonus": self.board.upper_bonus,
            "total_score": self.board.total_score,
            "game_over": self.is_game_over,
        }

    # ── Internal ──────────────────────────────────────────────────────────

    def _rolls_used(self) -> int:
        return {
            TurnState.ROLL_ONE: 0,
            TurnState.ROLL_TWO: 1,
            TurnState.ROLL_THREE: 2,
            TurnState.STOP: 3,
        }[self.turn.state]

    def _reset_turn(self) -> None:
        """Start a fresh turn: nothing held, blank dice, first roll pending."""
        self.held.clear()
        self.hand.clear()
        self.turn.reset_turn()
