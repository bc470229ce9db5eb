"""Repair habit completion ledgers.

Normalizes every ``completion_history`` to unique ``YYYY-MM-DD`` strings
and re-derives the ``completed`` flag for the given day. Streaks are left
alone.

Usage:
    python scripts/repair_ledgers.py \\
        --mongodb-url mongodb://localhost:27017 \\
        --db-name goal_tracker \\
        --user-id <user-id> \\
        [--today 2024-05-11] [--dry-run]
"""
import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path
from typing import Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from motor.motor_asyncio import AsyncIOMotorClient
from goaltracker.core.ledger import CompletionLedger
from goaltracker.models.micro_goal import MicroGoal
from goaltracker.services.micro_goal_service import MicroGoalService


def repair_goal(goal: MicroGoal, today: date) -> Optional[MicroGoal]:
    """Repaired copy of ``goal``, or None if it is already consistent."""
    ledger = CompletionLedger(goal.completion_history)
    history = ledger.to_list()
    completed = ledger.contains(today)

    if history == goal.completion_history and completed == goal.completed:
        return None

    return goal.model_copy(update={"completion_history": history, "completed": completed})


class LedgerRepairer:
    """Walks a user's habits and rewrites inconsistent ledgers."""

    def __init__(self, mongodb_url: str, db_name: str, user_id: str, today: date, dry_run: bool):
        self.mongodb_url = mongodb_url
        self.db_name = db_name
        self.user_id = user_id
        self.today = today
        self.dry_run = dry_run
        self.client: Optional[AsyncIOMotorClient] = None

        self.stats = {"checked": 0, "repaired": 0, "errors": 0}

    async def run(self):
        self.client = AsyncIOMotorClient(self.mongodb_url)
        service = MicroGoalService(self.client[self.db_name])

        mode = "DRY RUN" if self.dry_run else "REPAIR"
        print(f"=== {mode} MODE ===")
        print(f"User ID: {self.user_id}")
        print(f"Today: {self.today.isoformat()}")

        try:
            for goal in await service.list_goals_for_user(self.user_id):
                self.stats["checked"] += 1
                repaired = repair_goal(goal, self.today)
                if repaired is None:
                    continue

                print(f"  Repair: {goal.title} ({goal.id})")
                if self.dry_run:
                    self.stats["repaired"] += 1
                    continue

                try:
                    await service.save_goal(self.user_id, repaired)
                    self.stats["repaired"] += 1
                except Exception as e:
                    print(f"  Error saving {goal.id}: {e}")
                    self.stats["errors"] += 1
        finally:
            self.client.close()

        print("\n=== Repair Summary ===")
        print(f"Checked: {self.stats['checked']}")
        print(f"Repaired: {self.stats['repaired']}")
        print(f"Errors: {self.stats['errors']}")


def main():
    parser = argparse.ArgumentParser(description="Repair habit completion ledgers")
    parser.add_argument("--mongodb-url", required=True, help="MongoDB connection URL")
    parser.add_argument("--db-name", default="goal_tracker", help="Database name")
    parser.add_argument("--user-id", required=True, help="Owner of the habits to repair")
    parser.add_argument("--today", type=date.fromisoformat, default=date.today(), help="Day to derive 'completed' for")
    parser.add_argument("--dry-run", action="store_true", help="Report without writing")
    args = parser.parse_args()

    repairer = LedgerRepairer(args.mongodb_url, args.db_name, args.user_id, args.today, args.dry_run)
    asyncio.run(repairer.run())


if __name__ == "__main__":
    main()
