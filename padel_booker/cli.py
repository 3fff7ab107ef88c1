"""
Command line entry point.

Usage:
    padel-booker book [--debug] [--court 2] [--date 2026-11-02] [--times 12:00,13:00]
    padel-booker book --account joanna --account stefan
    padel-booker released "Padel court available for Saturday 26 April at 19:00"
    padel-booker create-profiles
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import date

from padel_booker.config import settings
from padel_booker.services.booking_service import BookingService


def _parse_times(value: str) -> list[str]:
    times = [t.strip() for t in value.split(",") if t.strip()]
    if not times:
        raise argparse.ArgumentTypeError("expected at least one time, e.g. 12:00,13:00")
    return times


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="padel-booker", description="Hello Club padel court booker")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug-level logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    book = subparsers.add_parser("book", help="Book the best slot on the target date")
    book.add_argument("--debug", action="store_true", default=None, help="Skip the final confirm click")
    book.add_argument("--court", help="Preferred court id")
    book.add_argument("--profile", help="Browser profile id (skips login)")
    book.add_argument(
        "--account",
        action="append",
        help="Credential suffix (HELLO_CLUB_EMAIL_<SUFFIX>); repeat to book for several accounts",
    )
    book.add_argument("--date", type=date.fromisoformat, help="Target date, YYYY-MM-DD")
    book.add_argument("--times", type=_parse_times, help="Comma-separated priority times")

    released = subparsers.add_parser("released", help="Book the slot from a release email subject")
    released.add_argument("subject")
    released.add_argument("--debug", action="store_true", default=None)
    released.add_argument("--profile")

    profiles = subparsers.add_parser(
        "create-profiles", help="Create a signed-in browser profile per account"
    )
    profiles.add_argument("--account", action="append", help="Credential suffix; repeatable")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "book" and args.profile and args.account and len(args.account) > 1:
        parser.error("--profile cannot be used with several --account values; set PROFILE_ID_<SUFFIX>")
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    service = BookingService()

    if args.command == "book":
        kwargs = {
            "target_date": args.date,
            "priority_times": args.times,
            "debug_mode": args.debug,
            "preferred_court": args.court,
            "profile_id": args.profile,
        }
        if args.account and len(args.account) > 1:
            results = asyncio.run(service.run_for_accounts(args.account, **kwargs))
        else:
            account = args.account[0] if args.account else None
            results = [service.run_booking(account=account, **kwargs)]
    elif args.command == "released":
        results = [
            service.run_release_booking(args.subject, debug_mode=args.debug, profile_id=args.profile)
        ]
    else:
        accounts = args.account or [None, *settings.account_suffixes]
        results = [service.create_profile(account) for account in accounts]

    payload = [result.model_dump(mode="json") for result in results]
    print(json.dumps(payload[0] if len(payload) == 1 else payload, indent=2))
    return 0 if all(result.success for result in results) else 1


if __name__ == "__main__":
    sys.exit(main())
