from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.togglehub.models import User
from app.togglehub.security import hash_password


class EmailTakenError(Exception):
    pass


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def find_user_by_email(s: Session, email: str) -> User | None:
    return s.execute(select(User).where(User.email == normalize_email(email))).scalar_one_or_none()


def create_user(s: Session, *, email: str, password: str, first_name: str, last_name: str) -> User:
    """Insert a user with a hashed password. Raises EmailTakenError on a duplicate email."""
    email = normalize_email(email)
    if find_user_by_email(s, email) is not None:
        raise EmailTakenError(email)

    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name.strip(),
        last_name=last_name.strip(),
    )
    s.add(user)
    try:
        s.flush()
    except IntegrityError as e:
        # lost a race against a concurrent sign-up with the same email
        s.rollback()
        raise EmailTakenError(email) from e
    return user
