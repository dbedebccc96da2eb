# clinic_core/patients/validators.py
from __future__ import annotations

from dataclasses import asdict

from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from rest_framework import serializers
from rest_framework.settings import api_settings

from clinic_core.patients.domain import Gender, PatientRecord

MAX_LANGUAGES = 10
MAX_EMERGENCY_CONTACTS = 10

# E.164: leading +, country code not starting with 0, at most 15 digits
e164_validator = RegexValidator(
    regex=r"^\+[1-9]\d{1,14}$",
    message="Enter a phone number in E.164 format, e.g. +14155552671.",
    code="e164",
)


class PersonalIdRules(serializers.Serializer):
    id = serializers.CharField(trim_whitespace=False, max_length=100)
    type = serializers.CharField(trim_whitespace=False, max_length=100)


class EmergencyContactRules(serializers.Serializer):
    name = serializers.CharField(trim_whitespace=False, max_length=100)
    closeness = serializers.CharField(trim_whitespace=False, max_length=100)
    phone = serializers.CharField(trim_whitespace=False, validators=[e164_validator])


class PatientRecordRules(serializers.Serializer):
    """
    Field constraints of a translated PatientRecord.
    Runs on the record (defaults applied), never on the raw payload.
    Values are checked untrimmed, exactly as they will be stored.
    """
    name = serializers.CharField(trim_whitespace=False, max_length=100)
    personal_id = PersonalIdRules()
    gender = serializers.ChoiceField(choices=[g.value for g in Gender])
    phone_number = serializers.CharField(trim_whitespace=False, allow_blank=True, validators=[e164_validator])
    languages = serializers.ListField(
        child=serializers.CharField(trim_whitespace=False, max_length=100, allow_blank=True),
        max_length=MAX_LANGUAGES,
        allow_empty=True,
    )
    birth_date = serializers.DateField()
    referred_by = serializers.CharField(trim_whitespace=False, max_length=100, allow_blank=True)
    special_note = serializers.CharField(trim_whitespace=False, max_length=500, allow_blank=True)
    emergency_contacts = EmergencyContactRules(many=True, max_length=MAX_EMERGENCY_CONTACTS, allow_empty=True)


def _as_rule_input(record: PatientRecord) -> dict:
    data = asdict(record)
    data["gender"] = record.gender.value if isinstance(record.gender, Gender) else record.gender
    return data


def validate_patient_record(record: PatientRecord) -> PatientRecord:
    """
    Raise ValidationError carrying every violated constraint (field -> messages).
    """
    rules = PatientRecordRules(data=_as_rule_input(record))
    if not rules.is_valid():
        raise ValidationError(_flatten(rules.errors))
    return record


def _flatten(errors, prefix: str = "") -> dict[str, list[str]]:
    """
    Turn DRF's nested error structure into {"emergency_contacts.0.phone": [...]}.
    """
    flat: dict[str, list[str]] = {}
    if isinstance(errors, dict):
        for key, value in errors.items():
            if key == api_settings.NON_FIELD_ERRORS_KEY and prefix:
                name = prefix
            else:
                name = f"{prefix}.{key}" if prefix else str(key)
            flat.update(_flatten(value, name))
    elif isinstance(errors, list):
        if all(not isinstance(e, (dict, list)) for e in errors):
            flat[prefix or "non_field_errors"] = [str(e) for e in errors]
        else:
            for idx, value in enumerate(errors):
                if value:
                    flat.update(_flatten(value, f"{prefix}.{idx}" if prefix else str(idx)))
    else:
        flat[prefix or "non_field_errors"] = [str(errors)]
    return flat
