#!/usr/bin/env python3
"""
child_report.py - Print progress reports from a store snapshot.

Usage:
  python scripts/child_report.py --snapshot data/demo_snapshot.json
  python scripts/child_report.py --snapshot data/demo_snapshot.json --mr-number 01-1002
"""

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from speechtrack.config import get_settings
from speechtrack.tracker import GoalCatalog, LevelGate, ProgressQuery, ProgressStore
from speechtrack.utils import load_snapshot

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def print_report(store: ProgressStore, query: ProgressQuery, levels: LevelGate, child_id: str):
    child = store.get_child(child_id)
    report = query.get_child_report(child_id)

    logger.info("=" * 50)
    logger.info(f"{child.child_name} (MR {child.mr_number}), registered {child.created_at:%Y-%m-%d}")
    logger.info(
        f"Sessions: {report.total_sessions}  Passed: {report.passed_sessions}  "
        f"Success rate: {report.success_rate_percent}%"
    )
    if report.last_session:
        last = report.last_session
        logger.info(
            f"Last session: {last.date:%Y-%m-%d} {last.category_id}/{last.goal_id} "
            f"{'PASS' if last.is_passed else 'FAIL'} by {last.therapist_name}"
        )
    else:
        logger.info("No sessions completed yet")

    for category in store.catalog.list_categories():
        summary = query.get_category_summary(child_id, category.id)
        stats = report.category_progress.get(category.id)
        rate = f"{stats.success_rate_percent}%" if stats else "-"
        open_levels = sum(1 for level in levels.get_levels(child_id, category.id) if level.open)
        logger.info(
            f"  {category.id:<8} goals {summary['passed_goals']}/{summary['total_goals']} passed, "
            f"current {summary['current_goal_id']}, levels open {open_levels}, session rate {rate}"
        )


def main():
    parser = argparse.ArgumentParser(
        description="Print child progress reports from a snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--snapshot",
        type=Path,
        required=True,
        help="Path to store snapshot JSON"
    )
    parser.add_argument(
        "--mr-number",
        type=str,
        default=None,
        help="Only report children with this MR number"
    )

    args = parser.parse_args()

    catalog = GoalCatalog.from_yaml(settings.goal_bank_path)
    store = ProgressStore.from_snapshot(
        load_snapshot(args.snapshot), catalog, pass_streak=settings.pass_streak
    )
    query = ProgressQuery(store)
    levels = LevelGate.from_settings(query, settings)

    children = store.find_by_mr_number(args.mr_number) if args.mr_number else store.list_children()
    if not children:
        logger.warning("No matching children in snapshot")
        sys.exit(1)

    for child in children:
        print_report(store, query, levels, child.id)


if __name__ == "__main__":
    main()
