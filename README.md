# clinicsvc

Domain logic for a small clinic. It covers patients and their medical
records, staff members with roles, statuses and assigned tasks, and
appointments booked against doctor availability.

Everything is plain Python with no runtime dependencies. Storage comes from
in-memory repositories, so the package runs on its own in scripts,
notebooks and tests.

## Installation

```
pip install clinicsvc
```

Requires Python 3.10 or later.

## Layout

- `clinicsvc.core` holds the shared pieces:
  - `BaseEntity` gives every entity an `id`, `created_at`, `updated_at` and
    `deleted_at`, and has a `touch()` method.
  - `UseCaseError` carries an `ErrorType` in its `kind` attribute. The kinds
    are `NOT_FOUND`, `INVALID_INPUT`, `CONFLICT` and `INTERNAL`.
  - `RecordNotFoundError` is what repositories raise when a record is missing.
- `clinicsvc.store` holds `InMemoryRepository`:
  - It offers `create`, `find_by_id`, `update`, `delete`, `find_all`,
    `find_with_filter` and `count`.
  - Deletion is soft unless you pass `hard_delete=True`.
  - List queries take a `FilterOptions` for page, page size, sort field,
    sort order and whether deleted rows are included. They return a
    `PaginationResult`.
- `clinicsvc.patient` covers patients:
  - `entity` defines `Patient` and `MedicalRecord`.
  - `repository` defines `PatientRepository`, which keeps medical records
    and loads them with the patient.
  - `usecase` defines `PatientUseCase` and its request dataclasses
    `RegisterPatientRequest`, `UpdatePatientDetailsRequest` and
    `AddMedicalRecordRequest`.
- `clinicsvc.staff` covers staff and their work:
  - `entity` defines `Staff`, `Task` and `ScheduleEntry`, plus the lookup
    values `StaffRole`, `StaffStatus` and `TaskStatus`.
  - `repository` defines `StaffRepository`, `TaskRepository` and
    `LookupRepository`.
  - `lookups` defines `LookupUseCase`, which adds and lists roles and
    statuses.
  - `usecase` defines `StaffUseCase` and its `TaskInput` dataclass.
- `clinicsvc.appointment` covers booking:
  - `entity` defines `Appointment` and `AppointmentStatus`.
  - `repository` defines `AppointmentRepository`.
  - `staff_client` defines `AvailableTimeSlot` and `StaffAvailabilityAdapter`.
  - `usecase` defines `AppointmentUseCase` with `ScheduleAppointmentRequest`
    and `RescheduleAppointmentRequest`.

## Patients

```python
from datetime import datetime, timezone
from uuid import uuid4

from clinicsvc.patient.repository import PatientRepository
from clinicsvc.patient.usecase import (
    AddMedicalRecordRequest,
    PatientUseCase,
    RegisterPatientRequest,
)

patients = PatientUseCase(PatientRepository())
patient = patients.register_patient(
    RegisterPatientRequest(first_name="Ada", last_name="Example", phone_number="phone-a")
)
patients.add_medical_record(
    patient.id,
    AddMedicalRecordRequest(
        staff_id=str(uuid4()),
        diagnosis="Seasonal allergy",
        date=datetime.now(timezone.utc),
    ),
)
print(patients.get_patient_medical_history(patient.id))
```

Use-case methods raise `UseCaseError` when something goes wrong. Its
`kind` attribute tells you what happened:

```python
from clinicsvc.core import ErrorType, UseCaseError

try:
    patients.get_patient_details(uuid4())
except UseCaseError as err:
    assert err.kind is ErrorType.NOT_FOUND
```

## Booking an appointment

`AppointmentUseCase` needs an object with a
`get_doctor_availability(doctor_id, start_time, end_time)` method that
reports free time slots. `StaffUseCase` has such a method, and
`StaffAvailabilityAdapter` wraps it. The adapter drops invalid slots and
turns failures into `UseCaseError`.

```python
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from clinicsvc.appointment.repository import AppointmentRepository
from clinicsvc.appointment.staff_client import StaffAvailabilityAdapter
from clinicsvc.appointment.usecase import AppointmentUseCase, ScheduleAppointmentRequest
from clinicsvc.staff.lookups import LookupUseCase
from clinicsvc.staff.repository import StaffRepository
from clinicsvc.staff.usecase import StaffUseCase

staff_repo = StaffRepository()
lookups = LookupUseCase(staff_repo.roles, staff_repo.statuses, staff_repo.task_statuses)
lookups.add_staff_role("Doctor")
lookups.add_staff_status("Active")

staff = StaffUseCase(staff_repo)
doctor = staff.add_staff(
    "Grace", "Example", datetime(1980, 1, 1, tzinfo=timezone.utc),
    "phone-b", "", "Doctor", "Active",
)

appointments = AppointmentUseCase(AppointmentRepository(), StaffAvailabilityAdapter(staff))
booking = appointments.schedule_appointment(
    ScheduleAppointmentRequest(
        patient_id=str(uuid4()),
        doctor_id=str(doctor.id),
        appointment_time=datetime.now(timezone.utc) + timedelta(days=1),
        duration=timedelta(minutes=30),
        reason="Check-up",
    )
)
appointments.cancel_appointment(booking.id)
```

## Scheduling rules

- An appointment is booked only when two checks pass:
  - The availability source reports a slot that covers the whole requested
    time.
  - The appointment repository holds no overlapping appointment for that
    doctor that is not cancelled.
- A completed or cancelled appointment cannot change status.
- An appointment cannot be rescheduled into the past.
- Rescheduling keeps a confirmed appointment confirmed.
- `StaffUseCase.get_doctor_availability` does not yet examine schedules. If
  an active doctor matches, it returns the whole requested window as one
  slot. An active doctor is a staff member whose role is "Doctor" and whose
  status is "Active", and both names must exist in the lookup tables.

## What this package does not do

- There is no network service and no command-line program. The use cases
  are plain Python classes you call directly.
- Storage lives in memory only. Nothing is written to a database or to
  disk, and data is gone when the process ends.

## Running the tests

```
pip install -e ".[test]"
pytest
```