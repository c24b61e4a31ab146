"""Create an admin account.

Usage:
    python -m wastecollect.create_admin --email admin@example.com [--password secret]

The password is prompted for when it is not given on the command line.
"""
import argparse
import getpass
import sys

from sqlalchemy.exc import SQLAlchemyError

from wastecollect.database import Base, SessionLocal, engine
from wastecollect.models import donation, ngo, pickup, user  # noqa: F401
from wastecollect.models.user import ROLE_ADMIN
from wastecollect.services.accounts import check_password_length, create_user, normalize_email


def create_admin(email: str, password: str, db) -> int:
    normalized_email = normalize_email(email)
    check_password_length(password)
    user = create_user(normalized_email, password, ROLE_ADMIN, db)
    db.commit()
    db.refresh(user)
    return user.id


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description='Create an admin account.')
    parser.add_argument('--email', required=True)
    parser.add_argument('--password')
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass('Password: ')

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        user_id = create_admin(args.email, password, db)
    except ValueError as exc:
        print(f'Invalid input: {exc}', file=sys.stderr)
        sys.exit(1)
    except SQLAlchemyError as exc:
        db.rollback()
        print(f'Database error: {exc}', file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()

    print(f'Admin account {user_id} created.')


if __name__ == '__main__':
    main()
