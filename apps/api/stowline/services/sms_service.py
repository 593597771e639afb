"""Twilio SMS client."""

from __future__ import annotations

import logging

import httpx

from stowline.core.config import settings
from stowline.core.structured_logging import mask_phone
from stowline.utils.normalization import to_e164

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{account_sid}/Messages.json"


async def send_sms(to_phone: str, body: str) -> tuple[bool, str | None]:
    """
    Send one SMS.

    Returns:
        (success, error_message)
    """
    if not settings.sms_enabled:
        logger.info("SMS disabled; not sending to %s", mask_phone(to_phone))
        return False, "SMS provider not configured"

    url = TWILIO_MESSAGES_URL.format(account_sid=settings.TWILIO_ACCOUNT_SID)
    data = {
        "To": to_e164(to_phone),
        "From": settings.TWILIO_FROM_NUMBER,
        "Body": body,
    }

    try:
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
            response = await client.post(
                url,
                data=data,
                auth=(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN),
            )
    except httpx.TimeoutException:
        logger.warning("Twilio timeout sending to %s", mask_phone(to_phone))
        return False, "Connection timeout"
    except httpx.RequestError as e:
        logger.warning("Twilio request failed for %s: %s", mask_phone(to_phone), e)
        return False, "Connection error"

    if response.status_code >= 400:
        logger.warning(
            "Twilio returned %s for %s", response.status_code, mask_phone(to_phone)
        )
        return False, f"SMS provider error ({response.status_code})"

    return True, None
