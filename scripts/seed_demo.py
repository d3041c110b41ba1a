#!/usr/bin/env python3
"""
seed_demo.py - Build a demo store snapshot with sample children.

Creates a few children, runs scripted sessions through the recorder so
goals pass and unlock, then saves the store as a JSON snapshot.

Usage:
  python scripts/seed_demo.py
  python scripts/seed_demo.py --output data/demo_snapshot.json --seed 7
"""

import argparse
import logging
import random
import sys
from datetime import timedelta
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from speechtrack.config import get_settings
from speechtrack.tracker import ProgressQuery, ProgressStore, SessionRecorder
from speechtrack.utils import save_snapshot

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


DEMO_CHILDREN = [
    {"child_name": "Ayaan Khan", "mr_number": "01-1001", "dob": "12/03/2019",
     "gender": "Male", "parent_name": "Sana Khan"},
    {"child_name": "Mehak Ali", "mr_number": "01-1002", "dob": "04/11/2020",
     "gender": "Female", "parent_name": "Imran Ali"},
    {"child_name": "Zoya Ahmed", "mr_number": "01-1003", "dob": "27/06/2018",
     "gender": "Female", "parent_name": "Hina Ahmed"},
]

THERAPISTS = ["Dr. Farah", "Dr. Usman"]


def run_sessions(store: ProgressStore, query: ProgressQuery, child_id: str,
                 sessions: int, pass_rate: float, rng: random.Random):
    """Run scripted sessions on each category's current goal."""
    start = store.clock.now() - timedelta(days=sessions)
    for day in range(sessions):
        for category in store.catalog.list_categories():
            current = query.get_current_goal(child_id, category.id)
            if current is None or current.progress.passed:
                continue
            recorder = SessionRecorder.from_settings(
                store, child_id, category.id, current.goal_id, settings
            )
            recorder.mark_all([rng.random() < pass_rate for _ in recorder.activities])
            recorder.submit(rng.choice(THERAPISTS), start + timedelta(days=day))


def main():
    parser = argparse.ArgumentParser(
        description="Create a demo snapshot with sample children and sessions",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=PROJECT_ROOT / "data" / "demo_snapshot.json",
        help="Output snapshot path"
    )
    parser.add_argument(
        "--sessions",
        type=int,
        default=12,
        help="Session days per child"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for activity results"
    )

    args = parser.parse_args()
    rng = random.Random(args.seed)

    store = ProgressStore.from_settings(settings)
    query = ProgressQuery(store)

    logger.info("Creating children...")
    for fields, pass_rate in zip(DEMO_CHILDREN, (0.85, 0.6, 0.4)):
        child = store.create_child(fields)
        run_sessions(store, query, child.id, args.sessions, pass_rate, rng)
        report = query.get_child_report(child.id)
        logger.info(
            f"  {child.child_name}: {report.total_sessions} sessions, "
            f"{report.success_rate_percent}% passed"
        )

    save_snapshot(store.to_snapshot(), args.output)
    logger.info(f"Snapshot: {args.output}")


if __name__ == "__main__":
    main()
