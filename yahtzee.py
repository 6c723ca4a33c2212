#!/usr/bin/env python3
"""
Command-line access to saved Yahtzee data.

Usage:
    python yahtzee.py scores                   # High-score list, best first
    python yahtzee.py stats                    # Per-category statistics
    python yahtzee.py remove 1700000000000     # Delete a high score by time
    python yahtzee.py dice-style               # Show dice face style
    python yahtzee.py dice-style numbers       # Switch to digits (or "dots")
"""
import argparse
import logging
import sys
from datetime import datetime

from game_engine import Category
from score_history import HighScoreRecord, HighScoreStore
from settings import show_dots_on_dice


def parse_args(argv=None):
    """Parse command-line arguments.

    Args:
        argv: Optional list of args (for testing). None uses sys.argv.

    Returns:
        Parsed argparse.Namespace.
    """
    parser = argparse.ArgumentParser(description="Yahtzee high scores and settings")
    parser.add_argument("--scores-file", help="High-score file (default: ~/.yahtzee_highscores.json)")
    parser.add_argument("--settings-file", help="Settings file (default: ~/.yahtzee_settings.json)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("scores", help="List high scores")
    sub.add_parser("stats", help="Show per-category statistics")
    remove = sub.add_parser("remove", help="Delete one high score")
    remove.add_argument("time", type=int, help="Record time (epoch milliseconds) as listed by 'scores'")
    style = sub.add_parser("dice-style", help="Show or set the dice face style")
    style.add_argument("style", nargs="?", choices=["dots", "numbers"])
    return parser.parse_args(argv)


def _format_time(millis):
    return datetime.fromtimestamp(millis / 1000).strftime("%Y-%m-%d %H:%M")


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    store = HighScoreStore(path=args.scores_file)

    if args.command == "scores":
        records = store.get_high_scores()
        if not records:
            print("No high scores yet.")
        for rank, record in enumerate(records, start=1):
            print(f"{rank:>2}. {record.total_score:>4}  {_format_time(record.time)}  ({record.time})")

    elif args.command == "stats":
        for cat, stat in store.get_stats().items():
            print(f"{cat.value:<15} {stat.number_of_times:>4}x  {stat.total_points:>6} pts  avg {stat.average:.1f}")

    elif args.command == "remove":
        target = HighScoreRecord(scores={cat: 0 for cat in Category}, time=args.time)
        if not store.remove_high_score(target):
            print(f"No high score with time {args.time}", file=sys.stderr)
            return 1
        print(f"Removed high score {args.time}")

    elif args.command == "dice-style":
        pref = show_dots_on_dice(args.settings_file)
        if args.style is not None:
            pref.set(args.style == "dots")
        print("dots" if pref.get() else "numbers")

    return 0


if __name__ == "__main__":
    sys.exit(main())
