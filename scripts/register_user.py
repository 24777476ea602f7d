"""Utility script to register a user in the local directory and print a bearer token."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from courier_dispatch.domain.entities import ROLE_DRIVER, ROLES, User
from courier_dispatch.infrastructure.database import SessionLocal, initialize_database
from courier_dispatch.infrastructure.repositories import UserRepository
from courier_dispatch.infrastructure.security import create_actor_token


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for user registration."""

    parser = argparse.ArgumentParser(
        description="Register a customer, driver or admin for local development.",
    )
    parser.add_argument("--name", required=True, help="Full name of the user")
    parser.add_argument("--phone", default=None, help="Contact phone (optional)")
    parser.add_argument(
        "--role",
        choices=ROLES,
        default=ROLE_DRIVER,
        help="Role of the user (default: driver)",
    )
    parser.add_argument(
        "--inactive",
        action="store_true",
        help="Register the user as inactive",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> User:
    """Create a user using the provided command line arguments."""

    args = parse_args(argv)
    name = args.name.strip()
    if not name:
        raise SystemExit("A non-empty name is required.")

    initialize_database()

    session = SessionLocal()
    try:
        user = UserRepository(session).create(
            User(
                id=None,
                name=name,
                phone=args.phone,
                role=args.role,
                is_active=not args.inactive,
            )
        )
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not store the user: {exc}") from exc
    finally:
        session.close()

    print(
        "User registered:\n"
        f"  ID: {user.id}\n"
        f"  Name: {user.name}\n"
        f"  Role: {user.role}\n"
        f"  Token: {create_actor_token(user.id, user.role)}"
    )
    return user


if __name__ == "__main__":
    main()
