#!/usr/bin/env python3
"""
validate_goal_bank.py - Check a goal bank YAML before deploying it.

Loads the goal bank, validates every category and goal, and prints a
summary of categories, goal counts and level layout.

Usage:
  python scripts/validate_goal_bank.py
  python scripts/validate_goal_bank.py --goal-bank data/custom_goal_bank.yaml --level-size 4
"""

import argparse
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pydantic import ValidationError

from speechtrack.config import get_settings
from speechtrack.tracker import GoalCatalog

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Validate a goal bank YAML file",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--goal-bank",
        type=Path,
        default=settings.goal_bank_path,
        help="Path to goal bank YAML (default: bundled goal bank)"
    )
    parser.add_argument(
        "--level-size",
        type=int,
        default=settings.level_size,
        help="Goals per level for the level summary"
    )

    args = parser.parse_args()

    logger.info(f"Loading goal bank: {args.goal_bank or 'bundled'}")
    try:
        catalog = GoalCatalog.from_yaml(args.goal_bank)
    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)
    except (ValidationError, ValueError) as e:
        logger.error(f"Goal bank is invalid: {e}")
        sys.exit(1)

    total_goals = 0
    for category in catalog.list_categories():
        goal_count = len(category.goals)
        levels = -(-goal_count // args.level_size)
        total_goals += goal_count
        logger.info(f"  {category.id:<8} {category.title}: {goal_count} goals, {levels} levels")
        logger.info(f"           first: {category.first_goal.id} {category.first_goal.title}")

    logger.info("=" * 50)
    logger.info(f"Categories: {len(catalog.list_categories())}")
    logger.info(f"Goals: {total_goals}")
    logger.info("Goal bank OK")


if __name__ == "__main__":
    main()
