"""Appointment entity and its status rules."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import ClassVar, Optional

from clinicsvc.core import NIL_ID, BaseEntity


class AppointmentStatus(str, enum.Enum):
    """Lifecycle states of an appointment."""

    SCHEDULED = "Scheduled"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"
    NO_SHOW = "NoShow"

    def __str__(self) -> str:
        return self.value


_TERMINAL = (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED)
_RESCHEDULABLE = (AppointmentStatus.SCHEDULED, AppointmentStatus.CONFIRMED)


@dataclass(kw_only=True)
class Appointment(BaseEntity):
    """An appointment between a patient and a doctor."""

    table_name: ClassVar[str] = "appointments"

    patient_id: uuid.UUID = NIL_ID
    doctor_id: uuid.UUID = NIL_ID
    appointment_time: Optional[datetime] = None
    duration: timedelta = timedelta(0)
    reason: str = ""
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: str = ""
    place: str = ""

    @property
    def end_time(self) -> Optional[datetime]:
        """Time the appointment ends, or None when no start time is set."""
        if self.appointment_time is None:
            return None
        return self.appointment_time + self.duration

    def set_status(self, new_status: AppointmentStatus) -> None:
        """Change the status; a completed or cancelled appointment is final.

        Raises ValueError on a transition out of a terminal state.
        """
        new_status = AppointmentStatus(new_status)
        if self.status in _TERMINAL and self.status != new_status:
            raise ValueError(
                f"cannot change status of a {self.status} appointment to {new_status}"
            )
        if self.status != new_status:
            self.status = new_status
            self.touch()

    def reschedule(
        self,
        new_time: Optional[datetime],
        new_duration: Optional[timedelta] = None,
        new_place: Optional[str] = None,
    ) -> None:
        """Move the appointment; ``None`` leaves a field as it is.

        Raises ValueError unless the appointment is scheduled or confirmed.
        """
        if self.status not in _RESCHEDULABLE:
            raise ValueError(f"cannot reschedule appointment with status {self.status}")

        changed = False
        if new_time is not None and self.appointment_time != new_time:
            self.appointment_time = new_time
            changed = True
        if new_duration is not None and self.duration != new_duration:
            self.duration = new_duration
            changed = True
        if new_place is not None and self.place != new_place:
            self.place = new_place
            changed = True

        if changed:
            if self.status != AppointmentStatus.CONFIRMED:
                self.status = AppointmentStatus.SCHEDULED
            self.touch()