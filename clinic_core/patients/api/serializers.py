# clinic_core/patients/api/serializers.py
from __future__ import annotations

from rest_framework import serializers


class PersonalIdPayloadSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    type = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)


class EmergencyContactPayloadSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    closeness = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    phone = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)


class PatientPayloadSerializer(serializers.Serializer):
    """
    Wire contract of Create/UpdatePatient.

    Structural only (types and shape): every field is optional here and field
    rules are enforced on the translated record by patients.validators.
    """
    id = serializers.IntegerField(required=False)
    active = serializers.BooleanField(required=False, default=True)
    name = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    personal_id = PersonalIdPayloadSerializer(required=False)
    gender = serializers.JSONField(required=False, default="UNSPECIFIED")
    phone_number = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    languages = serializers.ListField(
        child=serializers.CharField(allow_blank=True, trim_whitespace=False),
        required=False,
        default=list,
    )
    birth_date = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    referred_by = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    special_note = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=False)
    emergency_contacts = EmergencyContactPayloadSerializer(many=True, required=False, default=list)


class PatientIdsQuerySerializer(serializers.Serializer):
    """
    Query contract of GetPatientsIDs. Missing values are zero, bounds are
    checked by the selector (so a missing limit is rejected there).
    """
    offset = serializers.IntegerField(required=False, default=0)
    limit = serializers.IntegerField(required=False, default=0)
    search = serializers.CharField(required=False, allow_blank=True, default="")


class PatientIdSerializer(serializers.Serializer):
    id = serializers.IntegerField()


class PatientIdPageSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    results = serializers.ListField(child=serializers.IntegerField())


class EmergencyContactSerializer(serializers.Serializer):
    name = serializers.CharField()
    closeness = serializers.CharField()
    phone = serializers.CharField()


class PersonalIdSerializer(serializers.Serializer):
    id = serializers.CharField()
    type = serializers.CharField()


class PatientSerializer(serializers.Serializer):
    """Response shape of GetPatient (documentation only, built by the translator)."""
    id = serializers.IntegerField()
    active = serializers.BooleanField()
    name = serializers.CharField()
    personal_id = PersonalIdSerializer()
    gender = serializers.ChoiceField(choices=["UNSPECIFIED", "MALE", "FEMALE"])
    phone_number = serializers.CharField()
    languages = serializers.ListField(child=serializers.CharField())
    birth_date = serializers.DateField()
    age = serializers.IntegerField()
    referred_by = serializers.CharField()
    emergency_contacts = EmergencyContactSerializer(many=True)
    special_note = serializers.CharField()
