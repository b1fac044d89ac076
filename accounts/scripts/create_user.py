"""
Create a user (e.g. first admin) without going through the HTTP API. Run from project root:
  python -m accounts.scripts.create_user EMAIL PASSWORD NAME [role]
Example:
  python -m accounts.scripts.create_user admin@example.com your-secure-password "Site Admin" ADMIN
"""
import argparse
import logging
import sys

from accounts.core.config import get_settings
from accounts.core.database import SessionLocal
from accounts.core.errors import AccountError
from accounts.core.tokens import ResetTokenCodec, SessionTokenCodec
from accounts.services.accounts import AccountService
from accounts.services.directory import UserDirectory

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user account.")
    parser.add_argument("email", help="Email (unique, case-sensitive)")
    parser.add_argument("password", help="Password")
    parser.add_argument("name", help="Display name")
    parser.add_argument("role", nargs="?", default="USER", help="Role tag (default USER)")
    args = parser.parse_args(argv)

    settings = get_settings()
    db = SessionLocal()
    try:
        service = AccountService(
            directory=UserDirectory(db),
            session_codec=SessionTokenCodec.from_settings(settings),
            reset_codec=ResetTokenCodec.from_settings(settings),
            notifier=None,
            reset_link_base=settings.reset_link_base,
            bcrypt_rounds=settings.BCRYPT_ROUNDS,
        )
        service.register(
            email=args.email.strip(),
            password=args.password,
            name=args.name.strip(),
            role=args.role,
        )
        print(f"Created user '{args.email.strip()}' with role '{args.role}'.")
        return 0
    except AccountError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
