"""Doctor availability as reported by the staff service."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Optional, Protocol

from clinicsvc.core import ErrorType, UseCaseError


@dataclass(frozen=True)
class AvailableTimeSlot:
    """A block of time in which a doctor is available."""

    start_time: datetime
    end_time: datetime


class StaffAvailabilitySource(Protocol):
    """Anything that reports a doctor's free time slots."""

    def get_doctor_availability(
        self, doctor_id: uuid.UUID, start_time: datetime, end_time: datetime
    ) -> Optional[Iterable[Any]]:
        ...


def _slot_bounds(slot: Any) -> tuple:
    if isinstance(slot, tuple) and len(slot) == 2:
        return slot
    return getattr(slot, "start_time", None), getattr(slot, "end_time", None)


class StaffAvailabilityAdapter:
    """Asks the staff service for availability and validates what comes back."""

    def __init__(
        self,
        client: StaffAvailabilitySource,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.client = client
        self.logger = logger or logging.getLogger(__name__)

    def get_doctor_availability(
        self, doctor_id: uuid.UUID, start_time: datetime, end_time: datetime
    ) -> List[AvailableTimeSlot]:
        """Return the doctor's valid available slots in the window.

        Slots with a missing bound, or whose start is after their end, are
        dropped. Failures of the staff service raise UseCaseError.
        """
        self.logger.debug(
            "Requesting doctor availability doctorID=%s start=%s end=%s",
            doctor_id,
            start_time,
            end_time,
        )
        try:
            response = self.client.get_doctor_availability(doctor_id, start_time, end_time)
        except UseCaseError as exc:
            self.logger.error(
                "Staff service error kind=%s message=%s", exc.kind.name, exc.message
            )
            if exc.kind is ErrorType.NOT_FOUND:
                raise UseCaseError(
                    ErrorType.NOT_FOUND,
                    "doctor not found or not available in staff service",
                ) from exc
            raise UseCaseError(
                ErrorType.INTERNAL,
                f"staff service communication error: {exc.message}",
            ) from exc
        except Exception as exc:
            self.logger.error("Staff service call failed: %s", exc)
            raise UseCaseError(
                ErrorType.INTERNAL, f"failed to call staff service: {exc}"
            ) from exc

        if response is None:
            return []

        slots: List[AvailableTimeSlot] = []
        for raw in response:
            if raw is None:
                continue
            start, end = _slot_bounds(raw)
            if (
                not isinstance(start, datetime)
                or not isinstance(end, datetime)
                or start > end
            ):
                self.logger.warning(
                    "Received invalid time slot from staff service start=%s end=%s",
                    start,
                    end,
                )
                continue
            slots.append(AvailableTimeSlot(start_time=start, end_time=end))

        self.logger.debug("Received %d available time slots", len(slots))
        return slots