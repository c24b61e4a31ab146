from sqlalchemy.orm import Session

from wastecollect.auth.passwords import hash_password
from wastecollect.models.user import User

MIN_PASSWORD_LENGTH = 6


class EmailAlreadyRegisteredError(ValueError):
    """Raised when an account with the same email already exists."""


def normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    if not normalized:
        raise ValueError('Email is required.')
    local, _, domain = normalized.partition('@')
    if not local or not domain:
        raise ValueError('Email address is invalid.')
    return normalized


def check_password_length(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
    return value


def ensure_email_available(email: str, db: Session) -> None:
    existing = db.query(User).filter(User.email == email).first()
    if existing is not None:
        raise EmailAlreadyRegisteredError('Email is already registered.')


def create_user(email: str, password: str, role: str, db: Session) -> User:
    """Add a user to the session without committing."""
    ensure_email_available(email, db)
    user = User(email=email, hashed_password=hash_password(password), role=role)
    db.add(user)
    return user
