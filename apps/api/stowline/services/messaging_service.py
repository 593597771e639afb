"""Render a message template and hand it to the SMS or email provider."""

from __future__ import annotations

import logging
from typing import Any

from stowline.services import email_service, sms_service
from stowline.services.message_templates import TemplateRenderError, get_template

logger = logging.getLogger(__name__)


async def send_templated_sms(
    template_key: str, to_phone: str, variables: dict[str, Any]
) -> tuple[bool, str | None]:
    """
    Render and send an SMS template.

    Raises:
        TemplateRenderError: required variables missing (nothing is sent)
    """
    template = get_template(template_key)
    if template.channel != "sms":
        raise ValueError(f"Template '{template_key}' is not an SMS template")
    rendered = template.render(variables)
    return await sms_service.send_sms(to_phone, rendered.text)


async def send_templated_email(
    template_key: str, to_email: str, variables: dict[str, Any]
) -> tuple[bool, str | None]:
    """
    Render and send an email template.

    Raises:
        TemplateRenderError: required variables missing (nothing is sent)
    """
    template = get_template(template_key)
    if template.channel != "email":
        raise ValueError(f"Template '{template_key}' is not an email template")
    rendered = template.render(variables)
    return await email_service.send_email(
        to_email, rendered.subject or "", rendered.text, rendered.html
    )


async def send_sms_best_effort(template_key: str, to_phone: str | None, variables: dict[str, Any]) -> bool:
    """Send an SMS that must not fail the request it belongs to."""
    if not to_phone:
        return False
    try:
        ok, error = await send_templated_sms(template_key, to_phone, variables)
    except TemplateRenderError as e:
        logger.error("SMS %s not sent: %s", template_key, e)
        return False
    if not ok:
        logger.info("SMS %s not delivered: %s", template_key, error)
    return ok
