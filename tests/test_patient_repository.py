import uuid
from datetime import datetime, timezone

import pytest

from clinicsvc.core import NIL_ID, RecordNotFoundError
from clinicsvc.patient.entity import MedicalRecord, Patient
from clinicsvc.patient.repository import PatientRepository

VISIT = datetime(2030, 5, 1, tzinfo=timezone.utc)


@pytest.fixture
def repo():
    return PatientRepository()


def make_patient(repo, **kwargs):
    patient = Patient(first_name="Ada", last_name="Lane", phone_number="555-0100", **kwargs)
    repo.create(patient)
    return patient


def make_record(diagnosis="flu", patient_id=NIL_ID):
    return MedicalRecord(
        patient_id=patient_id,
        date=VISIT,
        staff_id=uuid.uuid4(),
        diagnosis=diagnosis,
        treatment="rest",
    )


def test_create_with_history_preloads_records(repo):
    patient = make_patient(repo, medical_history=[make_record("flu"), make_record("cold")])
    found = repo.find_by_id(patient.id)
    assert [r.diagnosis for r in found.medical_history] == ["flu", "cold"]
    assert all(r.patient_id == patient.id for r in found.medical_history)
    assert all(r.id != NIL_ID for r in found.medical_history)


def test_add_medical_record_links_and_assigns_id(repo):
    patient = make_patient(repo)
    record = make_record(patient_id=uuid.uuid4())
    repo.add_medical_record(patient.id, record)
    assert record.patient_id == patient.id
    assert record.id != NIL_ID
    assert record.created_at is not None
    found = repo.find_by_id(patient.id)
    assert [r.id for r in found.medical_history] == [record.id]


def test_records_are_per_patient(repo):
    first = make_patient(repo)
    second = Patient(first_name="Bo", last_name="Reed", phone_number="555-0101")
    repo.create(second)
    repo.add_medical_record(first.id, make_record("flu"))
    assert repo.find_by_id(second.id).medical_history == []


def test_add_record_to_missing_patient_raises(repo):
    with pytest.raises(RecordNotFoundError):
        repo.add_medical_record(uuid.uuid4(), make_record())


def test_find_missing_patient_raises(repo):
    with pytest.raises(RecordNotFoundError, match="entity not found"):
        repo.find_by_id(uuid.uuid4())


def test_update_keeps_records(repo):
    patient = make_patient(repo, medical_history=[make_record("flu")])
    found = repo.find_by_id(patient.id)
    found.update_details(address="1 Example Road")
    found.medical_history = []
    repo.update(found)
    again = repo.find_by_id(patient.id)
    assert again.address == "1 Example Road"
    assert [r.diagnosis for r in again.medical_history] == ["flu"]


def test_find_all_does_not_preload_history(repo):
    make_patient(repo, medical_history=[make_record("flu")])
    result = repo.find_all()
    assert result.total_items == 1
    assert result.items[0].medical_history == []


def test_duplicate_record_id_rejected(repo):
    patient = make_patient(repo)
    record = make_record()
    repo.add_medical_record(patient.id, record)
    with pytest.raises(ValueError):
        repo.add_medical_record(patient.id, MedicalRecord(id=record.id, diagnosis="x"))