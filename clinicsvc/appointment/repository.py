"""Storage for appointments with queries by patient, doctor and time."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Callable, List

from clinicsvc.appointment.entity import Appointment, AppointmentStatus
from clinicsvc.store import InMemoryRepository


class AppointmentRepository(InMemoryRepository[Appointment]):
    """Appointment store with the queries the scheduling logic needs."""

    def _select(
        self,
        predicate: Callable[[Appointment], bool],
        descending: bool = False,
    ) -> List[Appointment]:
        rows = [
            row
            for row in self._active()
            if row.appointment_time is not None and predicate(row)
        ]
        rows.sort(key=lambda row: row.appointment_time, reverse=descending)
        return [self._copy_out(row) for row in rows]

    def find_by_patient_id(self, patient_id: uuid.UUID) -> List[Appointment]:
        """All appointments of a patient, latest first."""
        return self._select(lambda row: row.patient_id == patient_id, descending=True)

    def find_by_doctor_id(
        self, doctor_id: uuid.UUID, start_time: datetime, end_time: datetime
    ) -> List[Appointment]:
        """A doctor's appointments starting in ``[start_time, end_time)``, earliest first."""
        return self._select(
            lambda row: row.doctor_id == doctor_id
            and start_time <= row.appointment_time < end_time
        )

    def find_by_date_range(
        self, start_time: datetime, end_time: datetime
    ) -> List[Appointment]:
        """All appointments starting in ``[start_time, end_time)``, earliest first."""
        return self._select(lambda row: start_time <= row.appointment_time < end_time)

    def check_doctor_availability(
        self, doctor_id: uuid.UUID, start_time: datetime, end_time: datetime
    ) -> bool:
        """True when no non-cancelled appointment of the doctor overlaps the slot."""
        conflicts = self._select(
            lambda row: row.doctor_id == doctor_id
            and row.status != AppointmentStatus.CANCELLED
            and row.appointment_time < end_time
            and row.appointment_time + row.duration > start_time
        )
        return not conflicts