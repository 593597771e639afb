"""Approval notifications for drivers and moving partners.

In-app, SMS and email are attempted concurrently and independently: one
channel failing never stops the others, and nothing here raises into the
approval flow. SMS and email are skipped when the account has no phone
number or email.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from stowline.core.config import settings
from stowline.db.enums import NotificationType, RecipientType
from stowline.db.models import Driver, MovingPartner
from stowline.services import messaging_service, moving_partner_service, notification_service

logger = logging.getLogger(__name__)


@dataclass
class ApprovalNotificationResult:
    in_app_success: bool = False
    sms_success: bool = False
    email_success: bool = False
    errors: list[str] = field(default_factory=list)


async def _in_app(
    db: Session,
    result: ApprovalNotificationResult,
    **kwargs,
) -> None:
    try:
        notification_service.create_notification(db, **kwargs)
        result.in_app_success = True
    except ValueError as e:
        result.errors.append(f"in_app: {e}")


async def _sms(
    result: ApprovalNotificationResult, template_key: str, phone: str | None, variables: dict
) -> None:
    if not phone:
        return
    try:
        ok, error = await messaging_service.send_templated_sms(template_key, phone, variables)
    except ValueError as e:  # includes TemplateRenderError
        ok, error = False, str(e)
    result.sms_success = ok
    if not ok:
        result.errors.append(f"sms: {error}")


async def _email(
    result: ApprovalNotificationResult, template_key: str, email: str | None, variables: dict
) -> None:
    if not email:
        return
    try:
        ok, error = await messaging_service.send_templated_email(template_key, email, variables)
    except ValueError as e:
        ok, error = False, str(e)
    result.email_success = ok
    if not ok:
        result.errors.append(f"email: {error}")


def _login_url() -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/login"


async def notify_driver_approved(
    db: Session, driver: Driver, status_message: str | None = None
) -> ApprovalNotificationResult:
    result = ApprovalNotificationResult()
    await asyncio.gather(
        _in_app(
            db,
            result,
            recipient_id=driver.id,
            recipient_type=RecipientType.DRIVER,
            notification_type=NotificationType.ACCOUNT_APPROVED,
            data={"name": driver.first_name},
            driver_id=driver.id,
        ),
        _sms(
            result,
            "driver_approval_sms",
            driver.phone_number,
            {"first_name": driver.first_name, "status_message": status_message},
        ),
        _email(
            result,
            "driver_approval_email",
            driver.email,
            {
                "first_name": driver.first_name,
                "last_name": driver.last_name,
                "services": ", ".join(driver.services or []) or None,
                "login_url": _login_url(),
            },
        ),
    )
    if result.errors:
        logger.info("Driver %s approval notifications incomplete: %s", driver.id, result.errors)
    return result


async def notify_mover_pending_drivers(
    db: Session, partner: MovingPartner
) -> ApprovalNotificationResult:
    """In-app only: approved, but no approved drivers yet."""
    result = ApprovalNotificationResult()
    await _in_app(
        db,
        result,
        recipient_id=partner.id,
        recipient_type=RecipientType.MOVER,
        notification_type=NotificationType.MOVER_PENDING_DRIVERS,
        data={"company_name": partner.name},
        moving_partner_id=partner.id,
    )
    if result.errors:
        logger.info("Mover %s pending-drivers notice failed: %s", partner.id, result.errors)
    return result


async def notify_mover_activated(
    db: Session, partner: MovingPartner, driver_name: str | None = None
) -> ApprovalNotificationResult:
    """
    Activation notices in every channel.

    `driver_name` is the approved driver that made the partner eligible;
    looked up when the caller does not know it.
    """
    if not driver_name:
        driver_name = moving_partner_service.first_approved_driver_name(db, partner.id)
    variables = {"company_name": partner.name, "driver_name": driver_name}

    result = ApprovalNotificationResult()
    await asyncio.gather(
        _in_app(
            db,
            result,
            recipient_id=partner.id,
            recipient_type=RecipientType.MOVER,
            notification_type=NotificationType.MOVER_ACTIVATED,
            data=variables,
            moving_partner_id=partner.id,
        ),
        _sms(result, "mover_activated_sms", partner.phone_number, variables),
        _email(
            result,
            "mover_activated_email",
            partner.email,
            {**variables, "email": partner.email, "login_url": _login_url()},
        ),
    )
    if result.errors:
        logger.info("Mover %s activation notifications incomplete: %s", partner.id, result.errors)
    return result
