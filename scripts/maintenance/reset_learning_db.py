"""
Wipe card states, review events and quiz statistics.

Prints what would be lost, then drops and recreates the tables. Card
assignments for today are lost too, so the next session load picks a
fresh set of new words.

Usage:
    python -m scripts.maintenance.reset_learning_db [--database-url URL] [--yes]
"""

import argparse
import logging

from vocab_srs import fsrs
from vocab_srs.errors import PersistenceFailure


def describe(repository: fsrs.SqlCardRepository) -> None:
    cards = repository.fetch_cards()
    reviewed = sum(1 for c in cards if not c.is_new)
    events = repository.get_review_events()
    quizzes = repository.fetch_quiz_stats()

    print(f"Database:        {repository.engine.url}")
    print(f"Cards:           {len(cards)} ({reviewed} reviewed at least once)")
    print(f"Review events:   {len(events)}")
    print(f"Quizzes:         {quizzes.completed_count}")


def main():
    parser = argparse.ArgumentParser(description="Reset the vocabulary learning database")
    parser.add_argument(
        "--database-url",
        help="SQLAlchemy URL (default: DATABASE_URL setting)"
    )
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Skip the confirmation prompt"
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        repository = fsrs.SqlCardRepository(args.database_url)
        describe(repository)

        if not args.yes:
            answer = input("\nDelete all of the above? Type 'reset' to continue: ")
            if answer.strip().lower() != "reset":
                print("Nothing deleted.")
                return

        fsrs.reset_db(repository.engine)
    except PersistenceFailure as exc:
        print(f"[ERROR] {exc}")
        raise SystemExit(1)

    print("Tables recreated; all cards will be provisioned again as New.")


if __name__ == "__main__":
    main()
