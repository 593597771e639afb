"""SendGrid email client."""

from __future__ import annotations

import logging

import httpx

from stowline.core.config import settings
from stowline.core.structured_logging import mask_email

logger = logging.getLogger(__name__)

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


async def send_email(
    to_email: str,
    subject: str,
    text: str,
    html: str | None = None,
) -> tuple[bool, str | None]:
    """
    Send one transactional email.

    Returns:
        (success, error_message)
    """
    if not settings.email_enabled:
        logger.info("Email disabled; not sending to %s", mask_email(to_email))
        return False, "Email provider not configured"

    content = [{"type": "text/plain", "value": text}]
    if html:
        content.append({"type": "text/html", "value": html})

    payload = {
        "personalizations": [{"to": [{"email": to_email}]}],
        "from": {"email": settings.EMAIL_FROM_ADDRESS, "name": settings.EMAIL_FROM_NAME},
        "subject": subject,
        "content": content,
    }
    headers = {
        "Authorization": f"Bearer {settings.SENDGRID_API_KEY}",
        "Content-Type": "application/json",
    }

    try:
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
            response = await client.post(SENDGRID_SEND_URL, headers=headers, json=payload)
    except httpx.TimeoutException:
        logger.warning("SendGrid timeout for %s", mask_email(to_email))
        return False, "Connection timeout"
    except httpx.RequestError as e:
        logger.warning("SendGrid request failed for %s: %s", mask_email(to_email), e)
        return False, "Connection error"

    if response.status_code >= 400:
        logger.warning("SendGrid returned %s for %s", response.status_code, mask_email(to_email))
        return False, f"Email provider error ({response.status_code})"

    return True, None
