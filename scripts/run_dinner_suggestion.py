#!/usr/bin/env python3
"""
Run the dinner suggestion job once against the configured Firestore project.

Usage:
    python scripts/run_dinner_suggestion.py [--at ISO_TIMESTAMP]

Examples:
    python scripts/run_dinner_suggestion.py
    python scripts/run_dinner_suggestion.py --at 2026-10-17T17:00:00-04:00
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv

load_dotenv(PROJECT_ROOT / '.env')

from cmlb.context import build_context
from cmlb.dinner_suggestion import check_and_send_dinner_suggestion
from cmlb.lib.logging_config import setup_logging


def parse_timestamp(value):
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO 8601 timestamp: {value}")


def main():
    parser = argparse.ArgumentParser(
        description="Run the hourly dinner suggestion check once",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
A run sends a real push notification and updates settings/notifications.lastSent
when every guard passes. Naive --at timestamps are read as UTC.
        """
    )
    parser.add_argument(
        "--at",
        type=parse_timestamp,
        default=None,
        help="Evaluate the schedule as if it were this instant (default: now)"
    )
    args = parser.parse_args()

    setup_logging()
    logger = logging.getLogger("run_dinner_suggestion")

    context = build_context()
    logger.info(f"Time zone: {context.config.timezone}, model: {context.config.suggestion_model}")

    try:
        outcome = check_and_send_dinner_suggestion(context, now=args.at)
    except Exception as e:
        logger.error(f"Dinner suggestion run failed: {e}", exc_info=True)
        sys.exit(1)

    print(json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
