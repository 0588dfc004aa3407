"""Appointment scheduling: availability checks, booking, status changes and queries."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable, List, Optional, Protocol, Union

from clinicsvc.appointment.entity import Appointment, AppointmentStatus
from clinicsvc.appointment.repository import AppointmentRepository
from clinicsvc.core import NIL_ID, ErrorType, RecordNotFoundError, UseCaseError, utcnow


class StaffAvailabilityClient(Protocol):
    """Reports the blocks of time in which a doctor is available."""

    def get_doctor_availability(
        self, doctor_id: uuid.UUID, start_time: datetime, end_time: datetime
    ) -> Iterable[Any]:
        ...


@dataclass(kw_only=True)
class ScheduleAppointmentRequest:
    """Data for a new appointment; the ids are UUIDs in text form."""

    patient_id: str = ""
    doctor_id: str = ""
    appointment_time: Optional[datetime] = None
    duration: Optional[timedelta] = None
    reason: str = ""
    place: str = ""


@dataclass(kw_only=True)
class RescheduleAppointmentRequest:
    """A new time and, optionally, a new duration and place."""

    new_time: Optional[datetime] = None
    new_duration: Optional[timedelta] = None
    place: str = ""


def _parse_id(text: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(text)
    except (ValueError, TypeError, AttributeError):
        return None


def _invalid_range(start_time: Optional[datetime], end_time: Optional[datetime]) -> bool:
    return start_time is None or end_time is None or end_time < start_time


def _now_like(moment: datetime) -> datetime:
    now = utcnow()
    return now if moment.tzinfo is not None else now.replace(tzinfo=None)


class AppointmentUseCase:
    """Operations on appointments, raising UseCaseError on failure."""

    def __init__(
        self,
        repository: AppointmentRepository,
        staff_client: StaffAvailabilityClient,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.repository = repository
        self.staff_client = staff_client
        self.logger = logger or logging.getLogger(__name__)

    # --- helpers -------------------------------------------------------

    @staticmethod
    def _require_appointment_id(appointment_id: uuid.UUID) -> None:
        if appointment_id == NIL_ID:
            raise UseCaseError(ErrorType.INVALID_INPUT, "invalid appointment ID")

    def _load(self, appointment_id: uuid.UUID, failure_message: str) -> Appointment:
        try:
            return self.repository.find_by_id(appointment_id)
        except RecordNotFoundError as exc:
            self.logger.warning("Appointment not found appointmentID=%s", appointment_id)
            raise UseCaseError(ErrorType.NOT_FOUND, "appointment not found") from exc
        except Exception as exc:
            self.logger.error(
                "Failed to load appointment appointmentID=%s: %s", appointment_id, exc
            )
            raise UseCaseError(ErrorType.INTERNAL, failure_message) from exc

    def _save(self, appointment: Appointment, failure_message: str) -> None:
        try:
            self.repository.update(appointment)
        except Exception as exc:
            self.logger.error(
                "Failed to save appointment appointmentID=%s: %s", appointment.id, exc
            )
            raise UseCaseError(ErrorType.INTERNAL, failure_message) from exc

    # --- operations ----------------------------------------------------

    def check_doctor_availability(
        self, doctor_id: uuid.UUID, start_time: datetime, end_time: datetime
    ) -> bool:
        """True when the staff service offers the slot and no booking conflicts."""
        self.logger.debug(
            "Checking doctor availability doctorID=%s start=%s end=%s",
            doctor_id,
            start_time,
            end_time,
        )
        if doctor_id == NIL_ID:
            raise UseCaseError(ErrorType.INVALID_INPUT, "invalid doctor ID")
        if _invalid_range(start_time, end_time):
            raise UseCaseError(ErrorType.INVALID_INPUT, "invalid time range")

        try:
            slots = list(
                self.staff_client.get_doctor_availability(doctor_id, start_time, end_time)
                or []
            )
        except UseCaseError as exc:
            if exc.kind is ErrorType.NOT_FOUND:
                self.logger.info("Doctor not found or unavailable doctorID=%s", doctor_id)
                return False
            self.logger.error(
                "Failed to check doctor availability doctorID=%s: %s", doctor_id, exc
            )
            raise

        if not slots:
            self.logger.info("Doctor has no available time slots doctorID=%s", doctor_id)
            return False

        if not any(
            slot.start_time <= start_time and end_time <= slot.end_time for slot in slots
        ):
            self.logger.info(
                "Requested slot does not fit any available slot doctorID=%s", doctor_id
            )
            return False

        try:
            free = self.repository.check_doctor_availability(doctor_id, start_time, end_time)
        except Exception as exc:
            self.logger.error("Failed to check local conflicts doctorID=%s: %s", doctor_id, exc)
            raise UseCaseError(
                ErrorType.INTERNAL, "failed to confirm appointment availability locally"
            ) from exc
        if not free:
            self.logger.info("Doctor has conflicting appointments doctorID=%s", doctor_id)
        return free

    def schedule_appointment(self, request: ScheduleAppointmentRequest) -> Appointment:
        """Book a new appointment if the doctor is free."""
        self.logger.info(
            "Scheduling appointment patientID=%s doctorID=%s place=%s",
            request.patient_id,
            request.doctor_id,
            request.place,
        )
        patient_id = _parse_id(request.patient_id)
        doctor_id = _parse_id(request.doctor_id)
        if (
            patient_id is None
            or doctor_id is None
            or not request.reason
            or request.appointment_time is None
            or request.duration is None
        ):
            raise UseCaseError(
                ErrorType.INVALID_INPUT,
                "missing or invalid required appointment information",
            )
        if request.duration <= timedelta(0):
            raise UseCaseError(
                ErrorType.INVALID_INPUT, "invalid appointment time or duration"
            )
        start = request.appointment_time
        end = start + request.duration

        if not self.check_doctor_availability(doctor_id, start, end):
            self.logger.warning(
                "Doctor not available doctorID=%s time=%s", doctor_id, start
            )
            raise UseCaseError(
                ErrorType.CONFLICT, "doctor is not available at the requested time"
            )

        appointment = Appointment(
            patient_id=patient_id,
            doctor_id=doctor_id,
            appointment_time=start,
            duration=request.duration,
            reason=request.reason,
            place=request.place,
            status=AppointmentStatus.SCHEDULED,
        )
        try:
            self.repository.create(appointment)
        except Exception as exc:
            self.logger.error("Failed to create appointment: %s", exc)
            raise UseCaseError(ErrorType.INTERNAL, "failed to schedule appointment") from exc
        self.logger.info("Appointment scheduled appointmentID=%s", appointment.id)
        return appointment

    def get_appointment_details(self, appointment_id: uuid.UUID) -> Appointment:
        """Return the appointment with this id."""
        self.logger.info("Getting appointment details appointmentID=%s", appointment_id)
        self._require_appointment_id(appointment_id)
        return self._load(appointment_id, "failed to retrieve appointment details")

    def update_appointment_status(
        self,
        appointment_id: uuid.UUID,
        status: Union[AppointmentStatus, str, None],
    ) -> Appointment:
        """Move the appointment to ``status``; completed and cancelled are final."""
        self.logger.info(
            "Updating appointment status appointmentID=%s newStatus=%s",
            appointment_id,
            status,
        )
        self._require_appointment_id(appointment_id)
        try:
            new_status = AppointmentStatus(status)
        except ValueError as exc:
            raise UseCaseError(
                ErrorType.INVALID_INPUT, "invalid or unspecified appointment status"
            ) from exc

        appointment = self._load(appointment_id, "failed to find appointment")
        try:
            appointment.set_status(new_status)
        except ValueError as exc:
            self.logger.warning(
                "Invalid status transition appointmentID=%s: %s", appointment_id, exc
            )
            raise UseCaseError(ErrorType.CONFLICT, str(exc)) from exc

        self._save(appointment, "failed to update appointment status")
        self.logger.info("Appointment status updated appointmentID=%s", appointment_id)
        return appointment

    def reschedule_appointment(
        self, appointment_id: uuid.UUID, request: RescheduleAppointmentRequest
    ) -> Appointment:
        """Move the appointment to a new future time if the doctor is free."""
        self.logger.info(
            "Rescheduling appointment appointmentID=%s newPlace=%s",
            appointment_id,
            request.place,
        )
        self._require_appointment_id(appointment_id)
        new_time = request.new_time
        if new_time is None:
            raise UseCaseError(
                ErrorType.INVALID_INPUT, "new appointment time cannot be empty or invalid"
            )
        if new_time < _now_like(new_time):
            raise UseCaseError(
                ErrorType.INVALID_INPUT,
                "cannot reschedule appointment to the past or zero time",
            )

        appointment = self._load(appointment_id, "failed to find appointment for reschedule")

        duration = appointment.duration
        new_duration = request.new_duration
        if new_duration is not None:
            if new_duration <= timedelta(0):
                raise UseCaseError(
                    ErrorType.INVALID_INPUT, "invalid new duration provided"
                )
            duration = new_duration
        new_place = request.place or None

        try:
            available = self.check_doctor_availability(
                appointment.doctor_id, new_time, new_time + duration
            )
        except UseCaseError:
            raise
        except Exception as exc:
            raise UseCaseError(
                ErrorType.INTERNAL,
                "failed to check doctor availability for reschedule",
            ) from exc
        if not available:
            self.logger.warning(
                "Doctor not available for reschedule appointmentID=%s", appointment_id
            )
            raise UseCaseError(
                ErrorType.CONFLICT, "doctor is not available at the requested new time"
            )

        try:
            appointment.reschedule(new_time, new_duration, new_place)
        except ValueError as exc:
            raise UseCaseError(ErrorType.CONFLICT, str(exc)) from exc

        self._save(appointment, "failed to save rescheduled appointment")
        self.logger.info(
            "Appointment rescheduled appointmentID=%s newTime=%s", appointment.id, new_time
        )
        return appointment

    def cancel_appointment(self, appointment_id: uuid.UUID) -> None:
        """Mark the appointment cancelled."""
        try:
            self.update_appointment_status(appointment_id, AppointmentStatus.CANCELLED)
        except UseCaseError as exc:
            if exc.kind is ErrorType.NOT_FOUND:
                raise UseCaseError(ErrorType.NOT_FOUND, "appointment not found") from exc
            if exc.kind is ErrorType.CONFLICT:
                raise UseCaseError(
                    ErrorType.CONFLICT, "appointment already completed or cancelled"
                ) from exc
            raise UseCaseError(ErrorType.INTERNAL, "failed to cancel appointment") from exc

    def get_appointments_for_patient(self, patient_id: uuid.UUID) -> List[Appointment]:
        """All appointments of a patient, latest first."""
        if patient_id == NIL_ID:
            raise UseCaseError(ErrorType.INVALID_INPUT, "invalid patient ID")
        try:
            return self.repository.find_by_patient_id(patient_id)
        except Exception as exc:
            raise UseCaseError(
                ErrorType.INTERNAL, "failed to retrieve patient appointments"
            ) from exc

    def get_appointments_for_doctor(
        self, doctor_id: uuid.UUID, start_time: datetime, end_time: datetime
    ) -> List[Appointment]:
        """A doctor's appointments starting in ``[start_time, end_time)``."""
        if doctor_id == NIL_ID:
            raise UseCaseError(ErrorType.INVALID_INPUT, "invalid doctor ID")
        if _invalid_range(start_time, end_time):
            raise UseCaseError(ErrorType.INVALID_INPUT, "invalid time range")
        try:
            return self.repository.find_by_doctor_id(doctor_id, start_time, end_time)
        except Exception as exc:
            raise UseCaseError(
                ErrorType.INTERNAL, "failed to retrieve doctor appointments"
            ) from exc