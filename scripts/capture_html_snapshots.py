#!/usr/bin/env python3
"""
Capture HTML snapshots from the live Hello Club site for testing.

This script:
1. Opens a browser session (with a saved profile if PROFILE_ID is set)
2. Logs in unless the profile is already signed in
3. Opens the booking grid for the target date
4. Saves the page HTML plus a summary of the parsed slots

Nothing is clicked, so no booking is made.

Usage:
    python scripts/capture_html_snapshots.py [YYYY-MM-DD]
"""

import json
import sys
import time
from datetime import date
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from padel_booker.config import settings
from padel_booker.providers.base import PageHandle
from padel_booker.providers.helloclub_grid import parse_slots
from padel_booker.providers.helloclub_site import HelloClubSite
from padel_booker.providers.session_provisioner import get_provisioner
from padel_booker.services.run_log import RunLog

SNAPSHOT_DIR = Path(__file__).parent.parent / "tests" / "fixtures" / "snapshots"


def save_snapshot(page: PageHandle, name: str, metadata: dict | None = None) -> Path:
    """Save HTML snapshot and metadata."""
    SNAPSHOT_DIR.mkdir(parents=True, exist_ok=True)

    html = page.html()
    html_path = SNAPSHOT_DIR / f"{name}.html"
    html_path.write_text(html, encoding="utf-8")
    print(f"  Saved: {html_path}")

    metadata = dict(metadata or {})
    metadata["url"] = page.current_url()
    metadata["captured_at"] = time.strftime("%Y-%m-%d %H:%M:%S")
    metadata["slots"] = [slot.model_dump() for slot in parse_slots(html)]
    meta_path = SNAPSHOT_DIR / f"{name}.meta.json"
    meta_path.write_text(json.dumps(metadata, indent=2), encoding="utf-8")
    print(f"  Saved: {meta_path} ({len(metadata['slots'])} grid cells)")

    return html_path


def capture_snapshots(target_date: date | None = None) -> None:
    """Main capture routine."""
    print("=" * 60)
    print("Hello Club HTML Snapshot Capture")
    print("=" * 60)

    if not settings.profile_id and not (
        settings.hello_club_email and settings.hello_club_password
    ):
        print("ERROR: Hello Club credentials not configured.")
        print("Set HELLO_CLUB_EMAIL and HELLO_CLUB_PASSWORD (or PROFILE_ID) in .env")
        sys.exit(1)

    site = HelloClubSite(settings.base_url, settings.sport, settings.timezone)
    target_date = target_date or site.target_date(settings.days_in_advance)
    provisioner = get_provisioner(settings)
    log = RunLog(name="padel_booker.snapshots")
    session = provisioner.create(settings.profile_id)

    try:
        if settings.profile_id:
            print("\n[1/2] Using saved profile, skipping login")
        else:
            print("\n[1/2] Performing login...")
            site.login(session.page, settings.hello_club_email, settings.hello_club_password, log)
            save_snapshot(session.page, "helloclub_post_login", {"state": "logged_in"})

        print(f"\n[2/2] Opening booking grid for {target_date}...")
        site.navigate_to_grid(
            session.page,
            target_date,
            log,
            grid_timeout=settings.grid_timeout_seconds,
            settle_seconds=settings.grid_settle_seconds,
        )
        save_snapshot(
            session.page,
            f"helloclub_grid_{target_date.isoformat()}",
            {"state": "grid_loaded", "target_date": target_date.isoformat()},
        )

        print("\n" + "=" * 60)
        print("Snapshot capture complete!")
        print(f"Snapshots saved to: {SNAPSHOT_DIR}")
        print("=" * 60)
    finally:
        provisioner.stop(session)
        print("\nSession closed.")


if __name__ == "__main__":
    capture_snapshots(date.fromisoformat(sys.argv[1]) if len(sys.argv) > 1 else None)
