# clinic_core/patients/models.py
from django.db import models

from clinic_core.common.models import SoftDeleteModel


class Gender(models.IntegerChoices):
    UNSPECIFIED = 0, "Unspecified"
    MALE = 1, "Male"
    FEMALE = 2, "Female"


class Patient(SoftDeleteModel):
    """
    Patient row. personal_id is embedded as two columns.

    The patients table also carries text_searchable, a tsvector generated by
    PostgreSQL from the text columns (see migration 0002). It is not mapped
    here: the application never writes it.
    """
    id = models.AutoField(primary_key=True)
    active = models.BooleanField(default=True)
    name = models.CharField(max_length=100)

    personal_id_value = models.CharField(max_length=100, db_column="personal_id_id")
    personal_id_type = models.CharField(max_length=100)

    gender = models.SmallIntegerField(choices=Gender.choices, default=Gender.UNSPECIFIED)
    phone_number = models.CharField(max_length=32, blank=True)
    languages = models.JSONField(default=list, blank=True)
    birth_date = models.DateField()
    referred_by = models.CharField(max_length=100, blank=True)
    special_note = models.CharField(max_length=500, blank=True)

    class Meta:
        db_table = "patients"
        indexes = [
            models.Index(fields=["personal_id_value", "personal_id_type"], name="patients_personal_id_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.personal_id_type}:{self.personal_id_value})"


class EmergencyContact(models.Model):
    """
    Owned exclusively by a patient; replaced wholesale on every update.
    """
    id = models.AutoField(primary_key=True)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name="emergency_contacts")
    name = models.CharField(max_length=100)
    closeness = models.CharField(max_length=100)
    phone = models.CharField(max_length=32)

    class Meta:
        db_table = "emergency_contacts"
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.name} ({self.closeness})"
