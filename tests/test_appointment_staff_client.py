import uuid
from datetime import datetime, timedelta, timezone

import pytest

from clinicsvc.appointment.staff_client import AvailableTimeSlot, StaffAvailabilityAdapter
from clinicsvc.core import ErrorType, UseCaseError

START = datetime(2024, 6, 3, 8, 0, tzinfo=timezone.utc)
END = START + timedelta(hours=8)


class FakeStaffClient:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get_doctor_availability(self, doctor_id, start_time, end_time):
        self.calls.append((doctor_id, start_time, end_time))
        if self.error is not None:
            raise self.error
        return self.response


def test_slots_are_returned_and_arguments_passed():
    doctor_id = uuid.uuid4()
    client = FakeStaffClient(response=[AvailableTimeSlot(START, END)])
    slots = StaffAvailabilityAdapter(client).get_doctor_availability(doctor_id, START, END)
    assert slots == [AvailableTimeSlot(start_time=START, end_time=END)]
    assert client.calls == [(doctor_id, START, END)]


def test_tuple_slots_are_accepted():
    client = FakeStaffClient(response=[(START, END)])
    slots = StaffAvailabilityAdapter(client).get_doctor_availability(uuid.uuid4(), START, END)
    assert slots == [AvailableTimeSlot(START, END)]


def test_invalid_slots_are_dropped():
    later = START + timedelta(hours=1)
    client = FakeStaffClient(
        response=[
            None,
            AvailableTimeSlot(START, None),
            (None, END),
            (later, START),
            (START, later),
        ]
    )
    slots = StaffAvailabilityAdapter(client).get_doctor_availability(uuid.uuid4(), START, END)
    assert slots == [AvailableTimeSlot(START, later)]


def test_zero_length_slot_is_kept():
    client = FakeStaffClient(response=[(START, START)])
    slots = StaffAvailabilityAdapter(client).get_doctor_availability(uuid.uuid4(), START, END)
    assert slots == [AvailableTimeSlot(START, START)]


def test_no_response_gives_empty_list():
    client = FakeStaffClient(response=None)
    assert StaffAvailabilityAdapter(client).get_doctor_availability(uuid.uuid4(), START, END) == []


def test_not_found_maps_to_not_found():
    client = FakeStaffClient(error=UseCaseError(ErrorType.NOT_FOUND, "nobody"))
    with pytest.raises(UseCaseError) as info:
        StaffAvailabilityAdapter(client).get_doctor_availability(uuid.uuid4(), START, END)
    assert info.value.kind is ErrorType.NOT_FOUND
    assert info.value.message == "doctor not found or not available in staff service"


def test_other_service_error_maps_to_internal():
    client = FakeStaffClient(error=UseCaseError(ErrorType.INVALID_INPUT, "bad range"))
    with pytest.raises(UseCaseError) as info:
        StaffAvailabilityAdapter(client).get_doctor_availability(uuid.uuid4(), START, END)
    assert info.value.kind is ErrorType.INTERNAL
    assert info.value.message == "staff service communication error: bad range"


def test_unexpected_error_maps_to_internal():
    client = FakeStaffClient(error=ConnectionError("unreachable"))
    with pytest.raises(UseCaseError) as info:
        StaffAvailabilityAdapter(client).get_doctor_availability(uuid.uuid4(), START, END)
    assert info.value.kind is ErrorType.INTERNAL
    assert info.value.message == "failed to call staff service: unreachable"