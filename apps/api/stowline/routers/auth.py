"""Authentication routes: verification-code login and session management."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from stowline.core.config import settings
from stowline.core.deps import COOKIE_NAME, get_current_account, get_db, require_csrf_header
from stowline.core.rate_limit import auth_limit, limiter
from stowline.core.security import create_session_token
from stowline.db.enums import AccountType
from stowline.schemas.auth import (
    AccountSession,
    LoginRequest,
    MeResponse,
    VerificationCodeRequest,
    VerificationCodeResponse,
)
from stowline.services import auth_service

router = APIRouter()


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRES_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )


@router.post(
    "/verification-code",
    response_model=VerificationCodeResponse,
    dependencies=[Depends(require_csrf_header)],
)
@limiter.limit(auth_limit)
async def send_verification_code(
    request: Request,
    data: VerificationCodeRequest,
    db: Session = Depends(get_db),
):
    """Send a one-time login code by SMS (admins: email)."""
    try:
        channel = await auth_service.request_verification_code(db, data.account_type, data.contact)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RuntimeError as e:
        db.rollback()
        raise HTTPException(status_code=502, detail=str(e))
    db.commit()
    return VerificationCodeResponse(sent=True, channel=channel)


@router.post("/login", response_model=MeResponse, dependencies=[Depends(require_csrf_header)])
def login(
    data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    """Exchange a verification code for a session cookie."""
    try:
        account = auth_service.verify_code(db, data.account_type, data.contact, data.code)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()

    set_session_cookie(response, create_session_token(account.id, data.account_type.value))

    if data.account_type == AccountType.ADMIN:
        display_name, admin_role = account.name or account.email, account.role
    elif data.account_type == AccountType.MOVER:
        display_name, admin_role = account.name, None
    else:
        display_name, admin_role = f"{account.first_name} {account.last_name}", None
    return MeResponse(
        account_id=account.id,
        account_type=data.account_type,
        email=account.email,
        display_name=display_name,
        admin_role=admin_role,
    )


@router.post("/logout", dependencies=[Depends(require_csrf_header)])
def logout(response: Response):
    response.delete_cookie(COOKIE_NAME, path="/")
    return {"status": "logged_out"}


@router.get("/me", response_model=MeResponse)
def me(session: AccountSession = Depends(get_current_account)):
    return MeResponse(**session.model_dump())
