"""Storage for patients and their medical records."""

from __future__ import annotations

import copy
import uuid
from typing import Dict

from clinicsvc.core import NIL_ID, RecordNotFoundError, utcnow
from clinicsvc.patient.entity import MedicalRecord, Patient
from clinicsvc.store import NOT_FOUND_MESSAGE, InMemoryRepository


class PatientRepository(InMemoryRepository[Patient]):
    """Patient store; medical records are kept apart and joined on lookup."""

    def __init__(self) -> None:
        super().__init__()
        self._records: Dict[uuid.UUID, MedicalRecord] = {}

    def _copy_in(self, entity: Patient) -> Patient:
        stored = copy.deepcopy(entity)
        stored.medical_history = []
        return stored

    def create(self, entity: Patient) -> None:
        """Store a new patient together with any records it already carries."""
        history = list(entity.medical_history)
        super().create(entity)
        for record in history:
            self.add_medical_record(entity.id, record)

    def find_by_id(self, entity_id: uuid.UUID) -> Patient:
        """Return the patient with its medical history loaded."""
        patient = super().find_by_id(entity_id)
        patient.medical_history = [
            copy.deepcopy(record)
            for record in self._records.values()
            if record.patient_id == entity_id and record.deleted_at is None
        ]
        return patient

    def add_medical_record(self, patient_id: uuid.UUID, record: MedicalRecord) -> None:
        """Store ``record`` under the given patient, assigning its id and timestamps."""
        if patient_id not in {row.id for row in self._active()}:
            raise RecordNotFoundError(NOT_FOUND_MESSAGE)
        record.patient_id = patient_id
        if record.id == NIL_ID:
            record.id = uuid.uuid4()
        elif record.id in self._records:
            raise ValueError(f"duplicate id: {record.id}")
        now = utcnow()
        if record.created_at is None:
            record.created_at = now
        if record.updated_at is None:
            record.updated_at = now
        self._records[record.id] = copy.deepcopy(record)