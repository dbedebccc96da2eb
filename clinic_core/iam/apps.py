# clinic_core/iam/apps.py
from django.apps import AppConfig


class IamConfig(AppConfig):
    name = "clinic_core.iam"

    def ready(self) -> None:
        # registers the bearer scheme of IdentityServiceAuthentication with drf-spectacular
        from clinic_core.iam import openapi  # noqa: F401
