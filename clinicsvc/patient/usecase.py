"""Patient management: registration, details, medical records and listing."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from clinicsvc.core import NIL_ID, ErrorType, RecordNotFoundError, UseCaseError
from clinicsvc.patient.entity import MedicalRecord, Patient
from clinicsvc.patient.repository import PatientRepository
from clinicsvc.store import FilterOptions


@dataclass(kw_only=True)
class RegisterPatientRequest:
    """Data needed to register a patient."""

    first_name: str = ""
    last_name: str = ""
    date_of_birth: Optional[datetime] = None
    gender: str = ""
    phone_number: str = ""
    address: str = ""


@dataclass(kw_only=True)
class UpdatePatientDetailsRequest:
    """Fields to change on a patient; empty strings and ``None`` are left alone."""

    first_name: str = ""
    last_name: str = ""
    date_of_birth: Optional[datetime] = None
    gender: str = ""
    phone_number: str = ""
    address: str = ""


@dataclass(kw_only=True)
class AddMedicalRecordRequest:
    """Data for a new medical record; ``staff_id`` is a UUID in text form."""

    staff_id: str = ""
    date: Optional[datetime] = None
    diagnosis: str = ""
    treatment: str = ""
    notes: str = ""


class PatientUseCase:
    """Operations on patients, raising UseCaseError on failure."""

    def __init__(
        self,
        repository: PatientRepository,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.repository = repository
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def _require_id(patient_id: uuid.UUID) -> None:
        if patient_id == NIL_ID:
            raise UseCaseError(ErrorType.INVALID_INPUT, "invalid patient ID")

    def _load(self, patient_id: uuid.UUID, failure_message: str) -> Patient:
        try:
            return self.repository.find_by_id(patient_id)
        except RecordNotFoundError as exc:
            self.logger.warning("Patient not found patientID=%s", patient_id)
            raise UseCaseError(ErrorType.NOT_FOUND, "patient not found") from exc
        except Exception as exc:
            self.logger.error("Failed to load patient patientID=%s: %s", patient_id, exc)
            raise UseCaseError(ErrorType.INTERNAL, failure_message) from exc

    def register_patient(self, request: RegisterPatientRequest) -> Patient:
        """Create and store a new patient."""
        self.logger.info(
            "Registering new patient firstName=%s lastName=%s",
            request.first_name,
            request.last_name,
        )
        if not request.first_name or not request.last_name or not request.phone_number:
            raise UseCaseError(
                ErrorType.INVALID_INPUT, "missing required patient information"
            )
        patient = Patient(
            first_name=request.first_name,
            last_name=request.last_name,
            date_of_birth=request.date_of_birth,
            gender=request.gender,
            phone_number=request.phone_number,
            address=request.address,
        )
        try:
            self.repository.create(patient)
        except Exception as exc:
            self.logger.error("Failed to save patient: %s", exc)
            raise UseCaseError(ErrorType.INTERNAL, "failed to register patient") from exc
        self.logger.info("Patient registered successfully patientID=%s", patient.id)
        return patient

    def get_patient_details(self, patient_id: uuid.UUID) -> Patient:
        """Return the patient with its medical history."""
        self.logger.info("Getting patient details patientID=%s", patient_id)
        self._require_id(patient_id)
        return self._load(patient_id, "failed to retrieve patient details")

    def update_patient_details(
        self, patient_id: uuid.UUID, request: UpdatePatientDetailsRequest
    ) -> Patient:
        """Apply the non-empty fields of ``request`` to the patient and store it."""
        self.logger.info("Updating patient details patientID=%s", patient_id)
        self._require_id(patient_id)
        patient = self._load(patient_id, "failed to find patient for update")
        patient.update_details(
            first_name=request.first_name,
            last_name=request.last_name,
            gender=request.gender,
            phone_number=request.phone_number,
            address=request.address,
            date_of_birth=request.date_of_birth,
        )
        try:
            self.repository.update(patient)
        except Exception as exc:
            self.logger.error("Failed to update patient patientID=%s: %s", patient_id, exc)
            raise UseCaseError(
                ErrorType.INTERNAL, "failed to update patient details"
            ) from exc
        self.logger.info("Patient details updated successfully patientID=%s", patient_id)
        return patient

    def add_medical_record(
        self, patient_id: uuid.UUID, request: AddMedicalRecordRequest
    ) -> MedicalRecord:
        """Store a new medical record for the patient and return it."""
        self.logger.info("Adding medical record patientID=%s", patient_id)
        self._require_id(patient_id)
        if not request.staff_id or not request.diagnosis or request.date is None:
            raise UseCaseError(
                ErrorType.INVALID_INPUT, "missing required medical record information"
            )
        try:
            staff_id = uuid.UUID(request.staff_id)
        except ValueError as exc:
            self.logger.error("Invalid staff ID format staffId=%s", request.staff_id)
            raise UseCaseError(ErrorType.INVALID_INPUT, "invalid staff ID format") from exc

        record = MedicalRecord(
            patient_id=patient_id,
            date=request.date,
            staff_id=staff_id,
            diagnosis=request.diagnosis,
            treatment=request.treatment,
            notes=request.notes,
        )
        try:
            self.repository.add_medical_record(patient_id, record)
        except Exception as exc:
            self.logger.error(
                "Failed to add medical record patientID=%s: %s", patient_id, exc
            )
            raise UseCaseError(ErrorType.INTERNAL, "failed to add medical record") from exc
        self.logger.info(
            "Medical record added successfully patientID=%s recordID=%s",
            patient_id,
            record.id,
        )
        return record

    def get_patient_medical_history(self, patient_id: uuid.UUID) -> List[MedicalRecord]:
        """Return the patient's medical records."""
        self.logger.info("Getting medical history patientID=%s", patient_id)
        self._require_id(patient_id)
        patient = self.get_patient_details(patient_id)
        return list(patient.medical_history or [])

    def list_patients(self) -> List[Patient]:
        """Return every stored patient."""
        self.logger.info("Listing all patients")
        try:
            result = self.repository.find_all(FilterOptions())
        except Exception as exc:
            self.logger.error("Failed to list patients: %s", exc)
            raise UseCaseError(ErrorType.INTERNAL, "failed to retrieve patients") from exc
        if result is None or result.items is None:
            return []
        return list(result.items)