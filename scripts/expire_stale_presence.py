"""Utility script to flip drivers with stale heartbeats offline and purge old notifications."""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from courier_dispatch.application.use_cases.notifications import purge_expired
from courier_dispatch.application.use_cases.presence import expire_stale_presence
from courier_dispatch.infrastructure.database import SessionLocal, initialize_database


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Mark drivers whose heartbeat timed out as offline.",
    )
    parser.add_argument(
        "--purge-notifications",
        action="store_true",
        help="Also purge notifications older than the retention window of this process",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every expired driver",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run one cleanup pass and print what changed."""

    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    initialize_database()

    session = SessionLocal()
    try:
        expired = expire_stale_presence(session)
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not update driver presence: {exc}") from exc
    finally:
        session.close()

    print(f"Drivers marked offline: {expired}")
    if args.purge_notifications:
        print(f"Notifications purged: {purge_expired()}")
    return expired


if __name__ == "__main__":
    main()
