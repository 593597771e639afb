"""Dispatch platform client (worker registration only)."""

from __future__ import annotations

import logging

import httpx

from stowline.core.config import settings
from stowline.core.structured_logging import mask_phone
from stowline.utils.normalization import to_e164

logger = logging.getLogger(__name__)


class DispatchError(Exception):
    """Worker registration failed."""


async def create_worker(
    *,
    name: str,
    phone: str,
    team_ids: list[str],
    vehicle_type: str | None = None,
) -> str:
    """
    Register a driver as a dispatch worker.

    One call, no retries: the admin retries the approval if it fails.

    Returns:
        The dispatch worker id

    Raises:
        DispatchError: not configured, transport failure, or non-2xx response
    """
    if not settings.DISPATCH_API_KEY:
        raise DispatchError("Dispatch API key not configured")

    payload: dict[str, object] = {
        "name": name,
        "phone": to_e164(phone),
        "teams": team_ids,
    }
    if vehicle_type:
        payload["vehicle"] = {"type": vehicle_type.upper()}

    url = f"{settings.DISPATCH_API_URL.rstrip('/')}/workers"
    try:
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
            response = await client.post(url, json=payload, auth=(settings.DISPATCH_API_KEY, ""))
    except httpx.RequestError as e:
        logger.warning("Dispatch worker creation failed for %s: %s", mask_phone(phone), e)
        raise DispatchError(f"Connection error: {e}") from e

    if response.status_code >= 400:
        try:
            message = response.json().get("message", "")
        except ValueError:
            message = response.text[:200]
        if isinstance(message, dict):
            message = message.get("message", "")
        raise DispatchError(f"HTTP {response.status_code} {message}".strip())

    worker_id = response.json().get("id")
    if not worker_id:
        raise DispatchError("Response did not include a worker id")
    return worker_id
