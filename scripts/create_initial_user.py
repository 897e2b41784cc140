"""Utility script to create a user and print a bearer token for the API."""

from __future__ import annotations

import argparse

from app.application.use_cases.users.create_user import create_user
from app.config import get_settings
from app.domain.errors import NotificationError
from app.infrastructure.database import (
    create_database_engine,
    create_session_factory,
    initialize_database,
)
from app.infrastructure.security import create_user_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Create a user for the notification service and print an access token.",
    )
    parser.add_argument(
        "--username",
        default="admin",
        help="Unique username (default: admin)",
    )
    parser.add_argument(
        "--email",
        default="admin@example.com",
        help="User email address (default: admin@example.com)",
    )
    return parser.parse_args()


def main() -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args()
    settings = get_settings()
    engine = create_database_engine(settings)
    initialize_database(engine)

    session = create_session_factory(engine)()
    try:
        user = create_user(session, username=args.username, email=args.email)
    except (ValueError, NotificationError) as exc:
        raise SystemExit(f"Could not create the user: {exc}") from exc
    finally:
        session.close()
        engine.dispose()

    print(f"Created user {user.username} (id={user.id}).")
    print(f"Access token: {create_user_token(user.id, settings=settings)}")


if __name__ == "__main__":
    main()
