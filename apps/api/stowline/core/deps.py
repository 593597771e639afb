"""FastAPI dependencies for authentication, authorization, and database access."""

from typing import Generator
from uuid import UUID

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from stowline.core.security import decode_session_token
from stowline.db.session import SessionLocal


# Cookie and header names
COOKIE_NAME = "stowline_session"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _load_account(db: Session, account_type: str, account_id: UUID):
    # Import here to avoid circular imports
    from stowline.db.enums import AccountType
    from stowline.db.models import Admin, Driver, MovingPartner, User

    model = {
        AccountType.USER.value: User,
        AccountType.DRIVER.value: Driver,
        AccountType.MOVER.value: MovingPartner,
        AccountType.ADMIN.value: Admin,
    }.get(account_type)
    if model is None:
        return None
    return db.query(model).filter(model.id == account_id).first()


def get_current_account(request: Request, db: Session = Depends(get_db)):
    """
    Get the authenticated account from the session cookie.

    Validates:
    - Session cookie exists
    - JWT is valid and not expired
    - Account still exists in the table named by account_type

    Raises:
        HTTPException 401: Authentication failed
    """
    from stowline.db.enums import AccountType, AdminRole
    from stowline.schemas.auth import AccountSession

    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_session_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid session")

    account_type = payload.get("account_type", "")
    if not AccountType.has_value(account_type):
        raise HTTPException(status_code=401, detail="Invalid session")

    try:
        account_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid session")

    account = _load_account(db, account_type, account_id)
    if not account:
        raise HTTPException(status_code=401, detail="Account not found")

    admin_role = None
    if account_type == AccountType.ADMIN.value:
        display_name = account.name or account.email
        if not AdminRole.has_value(account.role):
            raise HTTPException(
                status_code=403,
                detail=f"Unknown role '{account.role}'. Contact administrator.",
            )
        admin_role = AdminRole(account.role)
    elif account_type == AccountType.MOVER.value:
        display_name = account.name
    else:
        display_name = f"{account.first_name} {account.last_name}".strip()

    return AccountSession(
        account_id=account.id,
        account_type=AccountType(account_type),
        email=account.email,
        display_name=display_name,
        admin_role=admin_role,
    )


def require_account_types(allowed_types: list):
    """
    Dependency factory restricting an endpoint to some account types.

    Usage:
        @router.get("/mine", dependencies=[Depends(require_account_types([AccountType.USER]))])
    """
    def dependency(request: Request, db: Session = Depends(get_db)):
        session = get_current_account(request, db)
        if session.account_type not in allowed_types:
            raise HTTPException(
                status_code=403,
                detail=f"Account type '{session.account_type.value}' not authorized for this action",
            )
        return session
    return dependency


def require_admin(request: Request, db: Session = Depends(get_db)):
    """Any admin, including read-only viewers."""
    from stowline.db.enums import AccountType

    session = get_current_account(request, db)
    if session.account_type != AccountType.ADMIN:
        raise HTTPException(status_code=403, detail="Admin access required")
    return session


def require_admin_writer(request: Request, db: Session = Depends(get_db)):
    """Admins allowed to mutate data (not VIEWER)."""
    from stowline.db.enums import ADMIN_ROLES_CAN_WRITE

    session = require_admin(request, db)
    if session.admin_role not in ADMIN_ROLES_CAN_WRITE:
        raise HTTPException(
            status_code=403,
            detail=f"Role '{session.admin_role.value}' not authorized for this action",
        )
    return session


def require_csrf_header(request: Request) -> None:
    """
    Verify CSRF header on mutations.

    Apply to state-changing endpoints (POST, PATCH, DELETE).

    Raises:
        HTTPException 403: Missing or invalid CSRF header
    """
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise HTTPException(
            status_code=403,
            detail=f"Missing CSRF header. Include '{CSRF_HEADER}: {CSRF_HEADER_VALUE}'"
        )
