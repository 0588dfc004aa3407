import uuid
from datetime import datetime, timedelta, timezone

import pytest

from clinicsvc.appointment.entity import Appointment, AppointmentStatus
from clinicsvc.appointment.repository import AppointmentRepository

BASE = datetime(2030, 1, 1, 9, 0, tzinfo=timezone.utc)
HOUR = timedelta(hours=1)


@pytest.fixture
def repo():
    return AppointmentRepository()


@pytest.fixture
def doctor():
    return uuid.uuid4()


@pytest.fixture
def patient():
    return uuid.uuid4()


def book(repo, patient, doctor, start, duration=HOUR, status=AppointmentStatus.SCHEDULED):
    apt = Appointment(
        patient_id=patient,
        doctor_id=doctor,
        appointment_time=start,
        duration=duration,
        reason="checkup",
        status=status,
    )
    repo.create(apt)
    return apt


def test_find_by_patient_latest_first(repo, patient, doctor):
    early = book(repo, patient, doctor, BASE)
    late = book(repo, patient, doctor, BASE + 3 * HOUR)
    book(repo, uuid.uuid4(), doctor, BASE + HOUR)
    found = repo.find_by_patient_id(patient)
    assert [a.id for a in found] == [late.id, early.id]


def test_find_by_doctor_half_open_range(repo, patient, doctor):
    at_start = book(repo, patient, doctor, BASE)
    inside = book(repo, patient, doctor, BASE + HOUR)
    book(repo, patient, doctor, BASE + 2 * HOUR)
    book(repo, patient, uuid.uuid4(), BASE + HOUR)
    found = repo.find_by_doctor_id(doctor, BASE, BASE + 2 * HOUR)
    assert [a.id for a in found] == [at_start.id, inside.id]


def test_find_by_date_range_earliest_first(repo, patient, doctor):
    second = book(repo, patient, doctor, BASE + HOUR)
    first = book(repo, patient, uuid.uuid4(), BASE)
    book(repo, patient, doctor, BASE - HOUR)
    found = repo.find_by_date_range(BASE, BASE + 2 * HOUR)
    assert [a.id for a in found] == [first.id, second.id]


def test_deleted_appointments_excluded(repo, patient, doctor):
    apt = book(repo, patient, doctor, BASE)
    repo.delete(apt.id)
    assert repo.find_by_patient_id(patient) == []
    assert repo.check_doctor_availability(doctor, BASE, BASE + HOUR) is True


def test_overlap_makes_doctor_unavailable(repo, patient, doctor):
    book(repo, patient, doctor, BASE, duration=HOUR)
    assert repo.check_doctor_availability(
        doctor, BASE + HOUR / 2, BASE + 2 * HOUR
    ) is False


def test_adjacent_slots_are_free(repo, patient, doctor):
    book(repo, patient, doctor, BASE, duration=HOUR)
    assert repo.check_doctor_availability(doctor, BASE + HOUR, BASE + 2 * HOUR) is True
    assert repo.check_doctor_availability(doctor, BASE - HOUR, BASE) is True


def test_cancelled_appointments_do_not_conflict(repo, patient, doctor):
    book(repo, patient, doctor, BASE, status=AppointmentStatus.CANCELLED)
    assert repo.check_doctor_availability(doctor, BASE, BASE + HOUR) is True


def test_other_doctor_does_not_conflict(repo, patient, doctor):
    book(repo, patient, uuid.uuid4(), BASE)
    assert repo.check_doctor_availability(doctor, BASE, BASE + HOUR) is True


def test_base_operations_available(repo, patient, doctor):
    apt = book(repo, patient, doctor, BASE)
    apt.set_status(AppointmentStatus.CONFIRMED)
    repo.update(apt)
    assert repo.find_by_id(apt.id).status == AppointmentStatus.CONFIRMED
    assert repo.count({"doctor_id": doctor}) == 1