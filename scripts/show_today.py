"""
Print today's review queue and the statistics summary.

Loading the queue stamps newly admitted New cards with today's date,
exactly as a session start in the app does.

Usage:
    python -m scripts.show_today [--limit N] [--stats-only] [--groups ID ...]
"""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
import logging

from vocab_srs import fsrs
from vocab_srs.analytics import build_stats_dashboard
from vocab_srs.errors import PersistenceFailure
from vocab_srs.review_service import load_today
from vocab_srs.settings import load_settings


def print_queue(repository: fsrs.SqlCardRepository, new_card_limit: int) -> None:
    selection = load_today(repository, new_card_limit)

    print(f"Today's queue ({len(selection)} cards, new-card limit {new_card_limit})")
    print(f"  New: {selection.new_count}  Learning: {selection.learning_count}  "
          f"Review: {selection.review_count}")
    print("-" * 60)
    now = datetime.now(timezone.utc)
    for card in selection.cards:
        due = "-" if card.is_new else card.due.strftime("%Y-%m-%d %H:%M")
        recall = fsrs.current_retrievability(card, now)
        recall_text = "-" if recall is None else f"{recall:.0%}"
        print(f"  {card.card_id:<12} {card.state.name:<11} due {due:<17} "
              f"S={card.stability:6.2f} D={card.difficulty:5.2f} R={recall_text}")


def print_stats(repository: fsrs.SqlCardRepository, opened_group_ids=None) -> None:
    dashboard = build_stats_dashboard(repository, opened_group_ids=opened_group_ids)

    print("Statistics")
    print("-" * 60)
    print(f"  Words:        {dashboard.total_words}")
    print(f"  Seen:         {dashboard.seen_words}")
    print(f"  Learned:      {dashboard.learned_words}")
    print(f"  Studying:     {dashboard.studying_words}")
    print(f"  Weak:         {dashboard.weak_count}")
    print(f"  Stale:        {dashboard.stale_count}")
    print(f"  Due tomorrow: {dashboard.due_tomorrow}")
    if dashboard.recall_rate is not None:
        print(f"  Recall rate:  {dashboard.recall_rate:.1%}")
    print(f"  Quizzes:      {dashboard.quizzes_completed} completed, "
          f"average {dashboard.average_quiz_score:.0f}%")

    if dashboard.strongest_words:
        print("\n  Strongest words:")
        for card in dashboard.strongest_words:
            print(f"    {card.card_id:<12} S={card.stability:.1f} days")


def main():
    parser = argparse.ArgumentParser(
        description="Show today's review queue and statistics"
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Daily new-card limit (default: NEW_CARD_LIMIT setting)"
    )
    parser.add_argument(
        "--stats-only",
        action="store_true",
        help="Only print statistics, do not load (and stamp) today's queue"
    )
    parser.add_argument(
        "--groups",
        type=int,
        nargs="+",
        help="Opened group ids, for the studying-words count (default: all words)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log selection decisions"
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    settings = load_settings()
    new_card_limit = args.limit if args.limit is not None else settings.new_card_limit

    try:
        repository = fsrs.SqlCardRepository(settings.database_url)
        if not args.stats_only:
            print_queue(repository, new_card_limit)
            print()
        print_stats(repository, args.groups)
    except PersistenceFailure as exc:
        print(f"[ERROR] {exc}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
