"""High-score persistence for Yahtzee.

Stores completed games in ~/.yahtzee_highscores.json, keeping only the best
HIGHSCORE_LIMIT games by total score, together with running per-category
statistics. No front-end dependency.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path

from game_engine import (
    LOWER_CATEGORIES,
    UPPER_BONUS,
    UPPER_BONUS_THRESHOLD,
    UPPER_CATEGORIES,
    Category,
)

logger = logging.getLogger(__name__)

HIGHSCORE_LIMIT = 15


def _now_millis():
    return int(time.time() * 1000)


def _default_path():
    """Return the default path for the high-score file."""
    return Path.home() / ".yahtzee_highscores.json"


@dataclass
class HighScoreRecord:
    """One finished game: all 13 category scores and when it ended.

    `time` (epoch milliseconds) is the record's identity.
    """
    scores: dict[Category, int]
    time: int = field(default_factory=_now_millis)

    @classmethod
    def from_board(cls, board, time=None):
        """Snapshot a score board; open categories count as 0."""
        scores = {cat: board.score_for(cat) or 0 for cat in Category}
        if time is None:
            return cls(scores=scores)
        return cls(scores=scores, time=time)

    @property
    def small_score(self):
        return sum(self.scores.get(cat, 0) for cat in UPPER_CATEGORIES)

    @property
    def large_score(self):
        return sum(self.scores.get(cat, 0) for cat in LOWER_CATEGORIES)

    @property
    def total_score(self):
        bonus = UPPER_BONUS if self.small_score >= UPPER_BONUS_THRESHOLD else 0
        return self.small_score + self.large_score + bonus

    def to_dict(self):
        return {
            "time": self.time,
            "scores": {cat.value: self.scores.get(cat, 0) for cat in Category},
            "small_score": self.small_score,
            "large_score": self.large_score,
            "total_score": self.total_score,
        }

    @classmethod
    def from_dict(cls, data):
        """Rebuild a record; unknown category names are dropped, missing ones are 0."""
        by_name = {cat.value: cat for cat in Category}
        raw = data.get("scores", {})
        scores = {cat: 0 for cat in Category}
        for name, score in raw.items():
            cat = by_name.get(name)
            if cat is not None:
                scores[cat] = int(score)
        return cls(scores=scores, time=int(data["time"]))


@dataclass
class ScoreStat:
    """How often a category scored and how many points it brought in."""
    number_of_times: int = 0
    total_points: int = 0

    @property
    def average(self):
        if self.number_of_times == 0:
            return 0.0
        return self.total_points / self.number_of_times


def _yahtzee_times(score):
    # 50 for the first Yahtzee, 100 more for each extra one
    return 1 + max(score - 50, 0) // 100


def _apply_stats(stats, record, sign):
    """Add (sign=1) or withdraw (sign=-1) one record's non-zero scores."""
    for cat in Category:
        score = record.scores.get(cat, 0)
        if score == 0:
            continue
        stat = stats.setdefault(cat, ScoreStat())
        times = _yahtzee_times(score) if cat == Category.YAHTZEE else 1
        stat.number_of_times = max(stat.number_of_times + sign * times, 0)
        stat.total_points = max(stat.total_points + sign * score, 0)


class HighScoreStore:
    """JSON-file backed high-score list.

    Thread safe: the game session writes from a background thread while a
    front end may be reading or streaming.
    """

    def __init__(self, path=None, limit=HIGHSCORE_LIMIT):
        self.path = Path(path) if path is not None else _default_path()
        self.limit = limit
        self._lock = threading.RLock()
        self._changed = threading.Condition(self._lock)
        self._version = 0

    # ── File access ──────────────────────────────────────────────────────

    def _load(self):
        """Load the file. Returns empty data on missing/corrupt."""
        try:
            data = json.loads(self.path.read_text())
        except (FileNotFoundError, json.JSONDecodeError, OSError):
            return [], {}
        if not isinstance(data, dict):
            return [], {}

        records = []
        raw_scores = data.get("scores", [])
        if not isinstance(raw_scores, list):
            logger.warning("Ignoring high-score list of type %s", type(raw_scores).__name__)
            raw_scores = []
        for entry in raw_scores:
            try:
                records.append(HighScoreRecord.from_dict(entry))
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.warning("Skipping malformed high-score entry: %r", entry)

        by_name = {cat.value: cat for cat in Category}
        stats = {}
        raw_stats = data.get("stats", {})
        if isinstance(raw_stats, dict):
            for name, stat in raw_stats.items():
                cat = by_name.get(name)
                if cat is None or not isinstance(stat, dict):
                    continue
                try:
                    stats[cat] = ScoreStat(
                        number_of_times=int(stat.get("number_of_times", 0)),
                        total_points=int(stat.get("total_points", 0)),
                    )
                except (TypeError, ValueError):
                    logger.warning("Skipping malformed stats for %s: %r", name, stat)
        return records, stats

    def _save(self, records, stats):
        """Write records and stats atomically."""
        data = {
            "scores": [r.to_dict() for r in records],
            "stats": {
                cat.value: {"number_of_times": s.number_of_times, "total_points": s.total_points}
                for cat, s in stats.items()
            },
        }
        raw = json.dumps(data, indent=2).encode()
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        closed = False
        try:
            os.write(fd, raw)
            os.close(fd)
            closed = True
            os.replace(tmp, self.path)
        except BaseException:
            if not closed:
                os.close(fd)
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise

    def _notify(self):
        self._version += 1
        self._changed.notify_all()

    @staticmethod
    def _sorted(records):
        return sorted(records, key=lambda r: r.total_score, reverse=True)

    # ── Public API ───────────────────────────────────────────────────────

    def append_high_score(self, record):
        """Store a finished game.

        Anything ranked below the top `limit` games by total score is
        dropped. Statistics are updated from the new record whether or not
        it survives the cut. A stored record with the same `time` is
        replaced, and its contribution to the statistics withdrawn.
        """
        with self._lock:
            records, stats = self._load()
            for old in records:
                if old.time == record.time:
                    _apply_stats(stats, old, -1)
            records = [r for r in records if r.time != record.time]
            records.append(record)
            records = self._sorted(records)
            dropped = records[self.limit:]
            records = records[:self.limit]
            if dropped:
                logger.debug("Dropping %d high score(s) beyond the top %d", len(dropped), self.limit)

            _apply_stats(stats, record, 1)
            self._save(records, stats)
            self._notify()

    def remove_high_score(self, record):
        """Delete the record with the same `time`. Returns True if one was removed."""
        with self._lock:
            records, stats = self._load()
            kept = [r for r in records if r.time != record.time]
            if len(kept) == len(records):
                return False
            self._save(kept, stats)
            self._notify()
            return True

    def get_high_scores(self):
        """Return stored records, highest total first."""
        with self._lock:
            records, _ = self._load()
        return self._sorted(records)

    def get_stats(self):
        """Return {Category: ScoreStat} for every category."""
        with self._lock:
            _, stats = self._load()
        return {cat: stats.get(cat, ScoreStat()) for cat in Category}

    def update_scores(self):
        """Rewrite every stored record so its saved totals match its scores."""
        with self._lock:
            records, stats = self._load()
            self._save(self._sorted(records), stats)
            self._notify()

    def stream_high_scores(self):
        """Yield the current high-score list, then again after every change.

        The first list is produced immediately; each later `next()` blocks
        until the store has changed since the previous yield. The generator
        never ends.
        """
        seen = None
        while True:
            with self._changed:
                while self._version == seen:
                    self._changed.wait()
                seen = self._version
            yield self.get_high_scores()
