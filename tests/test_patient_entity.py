import uuid
from datetime import datetime, timezone

from clinicsvc.core import NIL_ID
from clinicsvc.patient.entity import MedicalRecord, Patient


def make_patient():
    return Patient(
        id=uuid.uuid4(),
        first_name="Ada",
        last_name="Lovelace",
        gender="F",
        phone_number="555-0100",
        address="1 Example Street",
        date_of_birth=datetime(1990, 5, 1, tzinfo=timezone.utc),
    )


def test_new_patient_has_empty_history():
    patient = Patient()
    assert patient.medical_history == []
    assert Patient().medical_history is not patient.medical_history


def test_add_medical_record_links_unlinked_record():
    patient = make_patient()
    record = MedicalRecord(diagnosis="flu", treatment="rest")
    patient.add_medical_record(record)
    assert len(patient.medical_history) == 1
    assert patient.medical_history[0].patient_id == patient.id
    assert patient.medical_history[0].diagnosis == "flu"
    assert patient.updated_at is not None


def test_add_medical_record_does_not_mutate_caller_record():
    patient = make_patient()
    record = MedicalRecord(diagnosis="flu")
    patient.add_medical_record(record)
    assert record.patient_id == NIL_ID


def test_add_medical_record_keeps_existing_link():
    patient = make_patient()
    other = uuid.uuid4()
    patient.add_medical_record(MedicalRecord(patient_id=other))
    assert patient.medical_history[0].patient_id == other


def test_update_details_changes_given_fields():
    patient = make_patient()
    patient.update_details(first_name="Grace", address="2 Example Road")
    assert patient.first_name == "Grace"
    assert patient.address == "2 Example Road"
    assert patient.last_name == "Lovelace"
    assert patient.updated_at is not None


def test_update_details_skips_empty_values():
    patient = make_patient()
    before = (patient.first_name, patient.phone_number, patient.date_of_birth)
    patient.update_details("", "", "", "", "", None)
    assert (patient.first_name, patient.phone_number, patient.date_of_birth) == before
    assert patient.updated_at is None


def test_update_details_same_values_do_not_touch():
    patient = make_patient()
    patient.update_details(
        patient.first_name,
        patient.last_name,
        patient.gender,
        patient.phone_number,
        patient.address,
        patient.date_of_birth,
    )
    assert patient.updated_at is None


def test_update_details_changes_date_of_birth():
    patient = make_patient()
    dob = datetime(1985, 1, 1, tzinfo=timezone.utc)
    patient.update_details(date_of_birth=dob)
    assert patient.date_of_birth == dob
    assert patient.updated_at is not None