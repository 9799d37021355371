"""Booking notifications: outbound HMAC-signed webhook.

The mail sender (confirmation and cancellation emails) sits behind the
webhook. Every event body is signed with HMAC-SHA256 using
``NOTIFY_WEBHOOK_SECRET`` and sent with ``X-Slotbook-Signature: sha256=<hex>``.

Receivers verify with:
    expected = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    assert hmac.compare_digest(expected, received_sig.removeprefix("sha256="))

Events
------
- ``booking.confirmed``  – appointment created by the booking flow
- ``booking.cancelled``  – appointment cancelled by an admin
"""
from __future__ import annotations

import datetime as _dt
import hashlib
import hmac
import json
import logging
from typing import Any, Dict, Optional

import httpx

from slotbook.config import BookingConfig
from slotbook.scheduling.types import BookingNotice

logger = logging.getLogger(__name__)

BOOKING_CONFIRMED = "booking.confirmed"
BOOKING_CANCELLED = "booking.cancelled"


def build_payload(notice: BookingNotice) -> Dict[str, Any]:
    return {
        "event": notice.event,
        "timestamp": _dt.datetime.now(_dt.timezone.utc).isoformat(),
        "data": {
            "appointment_id": str(notice.appointment_id),
            "type": "cancellation" if notice.event == BOOKING_CANCELLED else "confirmation",
            "service_name": notice.service_name,
            "service_price": str(notice.service_price),
            "service_duration": notice.service_duration,
            "appointment_date": notice.start.date().isoformat(),
            "appointment_time": notice.start.strftime("%H:%M"),
            "customer_name": notice.customer_name,
            "customer_email": notice.customer_email,
            "customer_phone": notice.customer_phone,
            "notes": notice.notes,
            **notice.extra,
        },
    }


def sign(body: bytes, secret: str) -> str:
    """Return ``sha256=<hex>`` HMAC signature for *body* using *secret*."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


class WebhookNotifier:
    """Posts booking events; silently disabled when URL or secret is missing."""

    def __init__(self, config: BookingConfig, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._config = config
        self._transport = transport

    async def notify(self, notice: BookingNotice) -> bool:
        """Deliver *notice*. Returns False on any failure; never raises."""
        if not self._config.notifications_enabled:
            logger.debug("WebhookNotifier: disabled, dropping %s", notice.event)
            return False

        body = json.dumps(build_payload(notice), ensure_ascii=False).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "X-Slotbook-Signature": sign(body, self._config.notify_webhook_secret or ""),
            "X-Slotbook-Event": notice.event,
        }
        url = self._config.notify_webhook_url or ""
        try:
            async with httpx.AsyncClient(
                timeout=self._config.notify_timeout_seconds, transport=self._transport,
            ) as client:
                resp = await client.post(url, content=body, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("WebhookNotifier: %s → %s failed: %s", notice.event, url, exc)
            return False

        if resp.status_code >= 400:
            logger.warning(
                "WebhookNotifier: %s → %s returned HTTP %d",
                notice.event, url, resp.status_code,
            )
            return False
        logger.info("WebhookNotifier: %s dispatched for %s", notice.event, notice.appointment_id)
        return True
