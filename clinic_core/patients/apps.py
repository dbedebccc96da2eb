# clinic_core/patients/apps.py
from django.apps import AppConfig


class PatientsConfig(AppConfig):
    default_auto_field = "django.db.models.AutoField"
    name = "clinic_core.patients"
    label = "patients"
