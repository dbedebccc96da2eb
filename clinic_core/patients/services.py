# clinic_core/patients/services.py
from __future__ import annotations

import logging
from dataclasses import replace

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from clinic_core.patients.domain import EmergencyContact as ContactRecord
from clinic_core.patients.domain import PatientRecord
from clinic_core.patients.models import EmergencyContact, Patient
from clinic_core.patients.selectors import PatientNotFound, visible_patients
from clinic_core.patients.translators import contact_to_row, patient_to_row

logger = logging.getLogger(__name__)


class PatientService:
    """
    Write side of the patient aggregate.

    create/update run in one transaction each, so a reader never sees a
    patient row next to a contact set from another generation.
    delete is a single UPDATE setting deleted_at.
    """

    @staticmethod
    def _insert_contacts(*, patient_id: int, contacts: list[ContactRecord]) -> list[ContactRecord]:
        # one INSERT per contact, in submission order, so ids follow that order
        stored = []
        for contact in contacts:
            row = EmergencyContact.objects.create(**contact_to_row(contact, patient_id=patient_id))
            stored.append(replace(contact, id=row.id, patient_id=patient_id))
        return stored

    @staticmethod
    @transaction.atomic
    def create_patient(*, record: PatientRecord) -> int:
        # firstly, insert the patient itself
        fields = patient_to_row(record)
        fields["active"] = True
        patient = Patient.objects.create(**fields)

        # afterward, insert all its emergency contacts
        PatientService._insert_contacts(patient_id=patient.id, contacts=record.emergency_contacts)

        logger.info(
            "patient %s created with %d emergency contacts",
            patient.id,
            len(record.emergency_contacts),
        )
        return patient.id

    @staticmethod
    @transaction.atomic
    def update_patient(*, record: PatientRecord) -> int:
        """
        Full replace: scalar columns by id, then the whole contact set
        (delete every stored contact, insert the submitted ones).
        created_at is never touched.
        """
        if not record.id:
            raise ValidationError("id has to be a non-zero integer")

        updated = visible_patients().filter(id=record.id).update(**patient_to_row(record))
        if updated == 0:
            # nothing written yet; raising leaves the atomic block and rolls back
            raise PatientNotFound()

        EmergencyContact.objects.filter(patient_id=record.id).delete()
        PatientService._insert_contacts(patient_id=record.id, contacts=record.emergency_contacts)

        logger.info(
            "patient %s updated with %d emergency contacts",
            record.id,
            len(record.emergency_contacts),
        )
        return record.id

    @staticmethod
    def delete_patient(*, patient_id: int) -> None:
        deleted = visible_patients().filter(id=patient_id).update(deleted_at=timezone.now())
        if deleted == 0:
            raise PatientNotFound()
        logger.info("patient %s soft-deleted", patient_id)
