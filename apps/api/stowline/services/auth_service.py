"""Verification-code login for every account type.

Customers, drivers and moving partners log in with a code texted to their
phone number; admins receive theirs by email.
"""

import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from stowline.core.config import settings
from stowline.core.security import constant_time_equals, generate_verification_code
from stowline.db.enums import AccountType, AdminAction, AuditTargetType
from stowline.db.models import Admin, Driver, MovingPartner, User, VerificationCode
from stowline.services import audit_service, messaging_service
from stowline.utils.dates import utcnow
from stowline.utils.normalization import normalize_email, normalize_phone

logger = logging.getLogger(__name__)

PHONE_ACCOUNT_MODELS = {
    AccountType.USER: User,
    AccountType.DRIVER: Driver,
    AccountType.MOVER: MovingPartner,
}


def normalize_contact(account_type: AccountType, contact: str) -> str:
    """
    Raises:
        ValueError: malformed phone number or email
    """
    if account_type == AccountType.ADMIN:
        email = normalize_email(contact)
        if not email or "@" not in email:
            raise ValueError("Invalid email address")
        return email
    phone = normalize_phone(contact)
    if phone is None:
        raise ValueError("Invalid phone number format")
    return phone


def find_account(db: Session, account_type: AccountType, contact: str):
    """Look up an account by its normalized login contact."""
    if account_type == AccountType.ADMIN:
        return db.query(Admin).filter(Admin.email == contact).first()
    model = PHONE_ACCOUNT_MODELS[account_type]
    return db.query(model).filter(model.phone_number == contact).first()


def issue_verification_code(db: Session, contact: str) -> VerificationCode:
    """Replace any outstanding code for the contact with a fresh one."""
    db.query(VerificationCode).filter(VerificationCode.contact == contact).delete(
        synchronize_session=False
    )
    record = VerificationCode(
        contact=contact,
        code=generate_verification_code(),
        expires_at=utcnow() + timedelta(minutes=settings.VERIFICATION_CODE_TTL_MINUTES),
    )
    db.add(record)
    db.flush()
    return record


async def request_verification_code(
    db: Session, account_type: AccountType, raw_contact: str
) -> str:
    """
    Create and send a login code. Returns the channel used ("sms" or "email").

    Raises:
        ValueError: malformed contact
        LookupError: no account with that contact
        RuntimeError: the provider did not accept the message
    """
    contact = normalize_contact(account_type, raw_contact)
    if not find_account(db, account_type, contact):
        raise LookupError("No account found for this contact")

    record = issue_verification_code(db, contact)
    variables = {"code": record.code, "ttl_minutes": settings.VERIFICATION_CODE_TTL_MINUTES}

    if account_type == AccountType.ADMIN:
        channel = "email"
        ok, error = await messaging_service.send_templated_email(
            "admin_verification_email", contact, variables
        )
    else:
        channel = "sms"
        ok, error = await messaging_service.send_templated_sms(
            "verification_code_sms", contact, variables
        )

    if not ok and settings.ENV != "dev":
        raise RuntimeError(f"Failed to send verification code: {error}")
    if not ok:
        logger.info("Dev mode: verification code not delivered (%s)", error)
    return channel


def verify_code(db: Session, account_type: AccountType, raw_contact: str, code: str):
    """
    Consume a login code and return the account it unlocks.

    Raises:
        ValueError: malformed contact, or code wrong/expired
    """
    contact = normalize_contact(account_type, raw_contact)
    record = (
        db.query(VerificationCode)
        .filter(
            VerificationCode.contact == contact,
            VerificationCode.expires_at > utcnow(),
        )
        .order_by(VerificationCode.created_at.desc())
        .first()
    )
    if not record or not constant_time_equals(record.code, code):
        raise ValueError("Invalid or expired verification code")

    account = find_account(db, account_type, contact)
    if not account:
        raise ValueError("Invalid or expired verification code")

    db.delete(record)

    if account_type == AccountType.ADMIN:
        account.last_login_at = utcnow()
        audit_service.log_admin_action(
            db,
            admin_id=account.id,
            action=AdminAction.LOGIN,
            target_type=AuditTargetType.ADMIN,
            target_id=account.id,
        )
    elif account_type == AccountType.USER:
        # Logging in by SMS proves ownership of the number
        account.verified_phone_number = True
    db.flush()
    return account
