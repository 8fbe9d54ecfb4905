from __future__ import annotations

import logging
from datetime import date

import httpx
from pydantic import ValidationError

from slotplanner.application.dto.booking_feed_payload import BookingFeedPayload
from slotplanner.application.exceptions import BookingFeedError
from slotplanner.application.ports.booking_feed import BookingFeedPort
from slotplanner.core.config import settings
from slotplanner.domain.entities.day_snapshot import DaySnapshot


class HttpBookingFeed(BookingFeedPort):
    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = (base_url or settings.BOOKING_API_BASE_URL or "").rstrip("/")
        self._token = token or settings.BOOKING_API_TOKEN
        self._client = client or httpx.Client(timeout=timeout or settings.BOOKING_API_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("BOOKING_API_BASE_URL is required for the HTTP booking feed")

    def get_day_snapshot(self, day: date) -> DaySnapshot:
        url = f"{self._base_url}/unavailable-slots"
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}

        try:
            response = self._client.get(url, params={"date": day.isoformat()}, headers=headers)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Error fetching booking snapshot", extra={"date": day.isoformat(), "error": str(e)})
            raise BookingFeedError(f"Booking store request failed: {e}") from e

        # Some deployments wrap the payload in {"data": {...}}.
        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            body = body["data"]
        if not isinstance(body, dict):
            raise BookingFeedError("Booking store returned a non-object payload")

        try:
            payload = BookingFeedPayload.model_validate(body)
        except ValidationError as e:
            raise BookingFeedError(f"Booking store payload invalid: {e}") from e

        snapshot = payload.to_snapshot(day)
        self._logger.info(
            "Booking snapshot fetched",
            extra={
                "date": day.isoformat(),
                "booked": len(snapshot.booked),
                "blocks": len(snapshot.blocks),
                "skipped": snapshot.skipped_records,
            },
        )
        return snapshot
