#!/usr/bin/env python3
"""Create an admin account, or promote an existing one.

Usage:
    ADMIN_EMAIL=admin@example.com ADMIN_PASSWORD='P@ssw0rd!' python scripts/create_admin.py
    python scripts/create_admin.py --email admin@example.com --password 'P@ssw0rd!' --name Admin
"""
import argparse
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def create_admin(email: str, password: str, name: str) -> str:
    """Returns 'created', 'promoted' or 'already_admin'."""
    from bookstore import models  # noqa: F401
    from bookstore.database import Base, engine, get_db_context
    from bookstore.models.user import User, UserRole, UserStatus
    from bookstore.services.auth import get_password_hash

    Base.metadata.create_all(bind=engine)

    with get_db_context() as db:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            db.add(
                User(
                    email=email,
                    name=name,
                    password_hash=get_password_hash(password),
                    role=UserRole.ADMIN,
                    status=UserStatus.ACTIVE,
                )
            )
            return "created"
        if user.role == UserRole.ADMIN:
            return "already_admin"
        user.role = UserRole.ADMIN
        return "promoted"


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL"))
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"))
    parser.add_argument("--name", default=os.getenv("ADMIN_NAME", "Admin"))
    args = parser.parse_args()

    if not args.email or not args.password:
        parser.error("--email and --password (or ADMIN_EMAIL / ADMIN_PASSWORD) are required")
    if len(args.password) < 8:
        parser.error("password must be at least 8 characters")

    outcome = create_admin(args.email, args.password, args.name)
    print(f"{args.email}: {outcome}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
