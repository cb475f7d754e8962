#!/usr/bin/env python3
"""
Update the settings/notifications document read by the dinner suggestion job.

Usage:
    python scripts/set_notification_settings.py [--enable | --disable] [--hour H] [--clear-last-sent]

Examples:
    python scripts/set_notification_settings.py --enable --hour 17
    python scripts/set_notification_settings.py --clear-last-sent
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv

load_dotenv(PROJECT_ROOT / '.env')

from cmlb.models import NotificationSettings
from cmlb.stores import FirestoreSettingsStore


def hour_type(value):
    hour = int(value)
    if not 0 <= hour <= 23:
        raise argparse.ArgumentTypeError("hour must be between 0 and 23")
    return hour


def apply_changes(settings, args):
    """Return a new NotificationSettings with the command line changes applied"""
    settings = settings or NotificationSettings()
    return NotificationSettings(
        enabled=settings.enabled if args.enabled is None else args.enabled,
        hour=settings.hour if args.hour is None else args.hour,
        last_sent=None if args.clear_last_sent else settings.last_sent,
    )


def main():
    parser = argparse.ArgumentParser(
        description='Update dinner suggestion notification settings'
    )
    toggle = parser.add_mutually_exclusive_group()
    toggle.add_argument('--enable', dest='enabled', action='store_const', const=True,
                        help='Turn daily notifications on')
    toggle.add_argument('--disable', dest='enabled', action='store_const', const=False,
                        help='Turn daily notifications off')
    parser.add_argument('--hour', type=hour_type, default=None,
                        help='Hour of day (0-23, notification time zone) to send at')
    parser.add_argument('--clear-last-sent', action='store_true',
                        help="Forget today's send so the job can run again")

    args = parser.parse_args()

    store = FirestoreSettingsStore()
    current = store.load()
    print(f"Current settings: {current}")

    updated = apply_changes(current, args)
    if updated == current:
        print("Nothing to change")
        return

    store.save(updated)
    print(f"Saved settings: {updated}")


if __name__ == '__main__':
    main()
