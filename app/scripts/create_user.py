"""
Create an account directly in the database (e.g. the first sysadmin). Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD EMAIL [role]
Example:
  python -m app.scripts.create_user root your-secure-password root@example.com sysadmin
"""
import argparse
import sys
import uuid

from app.core.config import settings
from app.core.database import session_scope
from app.core.security import PASSWORD_MIN_LEN, USERNAME_MIN_LEN, hash_password
from app.models.user import User, UserRole
from app.services.users import find_by_email, find_by_username, is_valid_email


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a Reanvue account with any role.")
    parser.add_argument("username", help=f"Username (at least {USERNAME_MIN_LEN} chars)")
    parser.add_argument("password", help=f"Password (at least {PASSWORD_MIN_LEN} chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument(
        "role",
        nargs="?",
        default=UserRole.USER.value,
        choices=[r.value for r in UserRole],
    )
    args = parser.parse_args()

    username = args.username.strip()
    email = args.email.strip()
    if len(username) < USERNAME_MIN_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN:
        print(f"Password must be at least {PASSWORD_MIN_LEN} characters.", file=sys.stderr)
        return 1
    if not is_valid_email(email):
        print("Invalid email.", file=sys.stderr)
        return 1

    with session_scope() as db:
        if find_by_username(db, username) is not None:
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        if find_by_email(db, email) is not None:
            print(f"Email '{email}' is already in use.", file=sys.stderr)
            return 1
        user = User(
            id=str(uuid.uuid4()),
            username=username,
            email=email,
            password=hash_password(args.password),
            display_name=username,
            avatar=settings.DEFAULT_AVATAR_URL,
            role=UserRole(args.role),
        )
        db.add(user)
        db.commit()
        print(f"Created user '{username}' with role '{args.role}'.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
