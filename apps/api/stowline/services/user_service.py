"""Customer account service."""

from uuid import UUID

from sqlalchemy.orm import Session

from stowline.db.models import User
from stowline.utils.normalization import normalize_phone


def get_user(db: Session, user_id: UUID) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_phone(db: Session, phone_digits: str) -> User | None:
    return db.query(User).filter(User.phone_number == phone_digits).first()


def update_phone_number(db: Session, user: User, raw_phone: str) -> User:
    """
    Change a customer's phone number.

    The new number is unverified until the customer confirms it.

    Raises:
        ValueError: not exactly 10 digits, or owned by another user
    """
    phone = normalize_phone(raw_phone)
    if phone is None:
        raise ValueError("Invalid phone number format")

    owner = get_user_by_phone(db, phone)
    if owner and owner.id != user.id:
        raise ValueError("Phone number is already in use")

    user.phone_number = phone
    user.verified_phone_number = False
    db.flush()
    return user
