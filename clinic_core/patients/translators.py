# clinic_core/patients/translators.py
"""
Explicit mapping of the patient aggregate between its three shapes:

    wire (JSON payloads)  <->  PatientRecord (domain)  <->  Patient rows (storage)

No shape leaks into another: views only see wire dicts, services and selectors
only see records and rows.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Iterable, Optional

from django.core.exceptions import ValidationError
from django.utils import timezone

from clinic_core.patients import models
from clinic_core.patients.domain import EmergencyContact, Gender, PatientRecord, PersonalId

BIRTH_DATE_FORMAT = "%Y-%m-%d"
_BIRTH_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

_GENDER_TO_STORAGE = {
    Gender.UNSPECIFIED: models.Gender.UNSPECIFIED,
    Gender.MALE: models.Gender.MALE,
    Gender.FEMALE: models.Gender.FEMALE,
}
_GENDER_FROM_STORAGE = {v.value: k for k, v in _GENDER_TO_STORAGE.items()}


# -----------------------------
# wire <-> domain
# -----------------------------

def parse_birth_date(value: str) -> date:
    # strptime alone accepts "1990-5-7"; the format is zero-padded only
    if not _BIRTH_DATE_RE.fullmatch(value or ""):
        raise ValidationError(
            f"failed to parse birth date: {value!r} does not match format YYYY-MM-DD"
        )
    try:
        return datetime.strptime(value, BIRTH_DATE_FORMAT).date()
    except ValueError as e:
        raise ValidationError(f"failed to parse birth date: {e}")


def format_birth_date(value: date) -> str:
    return value.strftime(BIRTH_DATE_FORMAT)


def gender_from_wire(value: Any) -> Gender:
    """Accepts the enum name ("MALE") or its number (1)."""
    if value is None or value == "":
        return Gender.UNSPECIFIED
    if isinstance(value, bool):
        raise ValidationError(f"unknown gender: {value!r}")
    if isinstance(value, int):
        try:
            return Gender(value)
        except ValueError:
            raise ValidationError(f"unknown gender: {value!r}")
    try:
        return Gender[str(value).strip().upper()]
    except KeyError:
        raise ValidationError(f"unknown gender: {value!r}")


def contact_from_wire(data: dict) -> EmergencyContact:
    return EmergencyContact(
        name=data.get("name", ""),
        closeness=data.get("closeness", ""),
        phone=data.get("phone", ""),
    )


def patient_from_wire(data: dict, *, patient_id: Optional[int] = None) -> PatientRecord:
    """
    Build a record from a structurally valid payload.
    Missing keys take their zero value, the way an unset message field would,
    except active which defaults to true.
    """
    personal_id = data.get("personal_id") or {}
    return PatientRecord(
        id=patient_id if patient_id is not None else data.get("id"),
        active=bool(data.get("active", True)),
        name=data.get("name", ""),
        personal_id=PersonalId(
            id=personal_id.get("id", ""),
            type=personal_id.get("type", ""),
        ),
        gender=gender_from_wire(data.get("gender")),
        phone_number=data.get("phone_number", ""),
        languages=list(data.get("languages") or []),
        birth_date=parse_birth_date(data.get("birth_date", "")),
        referred_by=data.get("referred_by", ""),
        special_note=data.get("special_note", ""),
        emergency_contacts=[contact_from_wire(c) for c in data.get("emergency_contacts") or []],
    )


def contact_to_wire(contact: EmergencyContact) -> dict:
    return {
        "name": contact.name,
        "closeness": contact.closeness,
        "phone": contact.phone,
    }


def patient_to_wire(record: PatientRecord, *, current_year: Optional[int] = None) -> dict:
    """
    age is current_year - birth_year: a coarse figure that ignores whether the
    birthday has passed this year.
    """
    year = current_year if current_year is not None else timezone.now().year
    return {
        "id": record.id,
        "active": record.active,
        "name": record.name,
        "personal_id": {
            "id": record.personal_id.id,
            "type": record.personal_id.type,
        },
        "gender": record.gender.name,
        "phone_number": record.phone_number,
        "languages": list(record.languages),
        "birth_date": format_birth_date(record.birth_date),
        "age": record.age_in(year),
        "referred_by": record.referred_by,
        "emergency_contacts": [contact_to_wire(c) for c in record.emergency_contacts],
        "special_note": record.special_note,
    }


# -----------------------------
# domain <-> storage
# -----------------------------

def patient_to_row(record: PatientRecord) -> dict:
    """Column values of the patients row (identity and timestamps excluded)."""
    return {
        "active": record.active,
        "name": record.name,
        "personal_id_value": record.personal_id.id,
        "personal_id_type": record.personal_id.type,
        "gender": _GENDER_TO_STORAGE[record.gender],
        "phone_number": record.phone_number,
        "languages": list(record.languages),
        "birth_date": record.birth_date,
        "referred_by": record.referred_by,
        "special_note": record.special_note,
    }


def contact_to_row(contact: EmergencyContact, *, patient_id: int) -> dict:
    return {
        "patient_id": patient_id,
        "name": contact.name,
        "closeness": contact.closeness,
        "phone": contact.phone,
    }


def contact_from_row(row: models.EmergencyContact) -> EmergencyContact:
    return EmergencyContact(
        id=row.id,
        patient_id=row.patient_id,
        name=row.name,
        closeness=row.closeness,
        phone=row.phone,
    )


def patient_from_row(
    row: models.Patient,
    contacts: Optional[Iterable[models.EmergencyContact]] = None,
) -> PatientRecord:
    if contacts is None:
        contacts = row.emergency_contacts.all()
    return PatientRecord(
        id=row.id,
        active=row.active,
        name=row.name,
        personal_id=PersonalId(id=row.personal_id_value, type=row.personal_id_type),
        gender=_GENDER_FROM_STORAGE[row.gender],
        phone_number=row.phone_number,
        languages=list(row.languages or []),
        birth_date=row.birth_date,
        referred_by=row.referred_by,
        special_note=row.special_note,
        emergency_contacts=[contact_from_row(c) for c in contacts],
        created_at=row.created_at,
        deleted_at=row.deleted_at,
    )
