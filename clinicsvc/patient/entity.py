"""Patient and medical record entities."""

from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, List, Optional

from clinicsvc.core import NIL_ID, BaseEntity


@dataclass(kw_only=True)
class MedicalRecord(BaseEntity):
    """One entry in a patient's medical history."""

    table_name: ClassVar[str] = "medical_records"

    patient_id: uuid.UUID = NIL_ID
    date: Optional[datetime] = None
    staff_id: uuid.UUID = NIL_ID
    diagnosis: str = ""
    treatment: str = ""
    notes: str = ""


@dataclass(kw_only=True)
class Patient(BaseEntity):
    """A patient with contact details and medical history."""

    table_name: ClassVar[str] = "patients"

    first_name: str = ""
    last_name: str = ""
    date_of_birth: Optional[datetime] = None
    gender: str = ""
    phone_number: str = ""
    address: str = ""
    medical_history: List[MedicalRecord] = field(default_factory=list)

    def add_medical_record(self, record: MedicalRecord) -> None:
        """Append a copy of ``record``, linking it to this patient if unlinked."""
        entry = dataclasses.replace(record)
        if entry.patient_id == NIL_ID:
            entry.patient_id = self.id
        self.medical_history.append(entry)
        self.touch()

    def update_details(
        self,
        first_name: str = "",
        last_name: str = "",
        gender: str = "",
        phone_number: str = "",
        address: str = "",
        date_of_birth: Optional[datetime] = None,
    ) -> None:
        """Overwrite the fields given; empty strings and ``None`` are skipped."""
        changed = False
        for name, value in (
            ("first_name", first_name),
            ("last_name", last_name),
            ("gender", gender),
            ("phone_number", phone_number),
            ("address", address),
        ):
            if value and getattr(self, name) != value:
                setattr(self, name, value)
                changed = True
        if date_of_birth is not None and self.date_of_birth != date_of_birth:
            self.date_of_birth = date_of_birth
            changed = True
        if changed:
            self.touch()