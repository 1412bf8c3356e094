"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user
  python -m app.scripts.create_user --email ops@acme.test --password secret123 --name Ops --role EMPLOYEE
Without arguments the SEED_ADMIN_* settings are used and the role is ADMIN.
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from app.core.config import settings
from app.core.database import SessionLocal
from app.core.errors import AppError
from app.models import Role, User
from app.schemas.users import UserCreate
from app.services import users as users_service
from app.services.auth import normalize_email

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user (no registration UI).")
    parser.add_argument("--email", help="Account email (default: SEED_ADMIN_EMAIL)")
    parser.add_argument("--password", help="Password, 8-128 chars (default: SEED_ADMIN_PASSWORD)")
    parser.add_argument("--name", help="Display name (default: SEED_ADMIN_NAME)")
    parser.add_argument(
        "--role",
        default=Role.ADMIN.value,
        choices=[r.value for r in Role],
    )
    parser.add_argument("--company-id", type=int, default=None, help="Required for CLIENT")
    args = parser.parse_args(argv)

    seeding = args.email is None
    email = args.email or settings.SEED_ADMIN_EMAIL
    password = args.password or settings.SEED_ADMIN_PASSWORD.get_secret_value()
    name = args.name or settings.SEED_ADMIN_NAME

    try:
        data = UserCreate(
            name=name,
            email=email,
            password=password,
            role=Role(args.role),
            client_company_id=args.company_id,
        )
    except ValidationError as exc:
        print(f"Invalid user data: {exc}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        if db.query(User.id).filter(User.email == normalize_email(email)).first():
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 0 if seeding else 1
        try:
            user = users_service.create_user(db, data)
        except AppError as exc:
            print(exc.message, file=sys.stderr)
            return 1
        print(f"Created user '{user.email}' with role '{user.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    sys.exit(main())
