# clinic_core/common/models.py
from __future__ import annotations

from django.db import models


class SoftDeleteModel(models.Model):
    """
    Creation timestamp + soft-delete marker.

    deleted_at is a plain nullable column: every read query filters on it
    explicitly (see visible()), there is no manager-level hook.
    """
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    class Meta:
        abstract = True

    @classmethod
    def visible(cls) -> models.QuerySet:
        return cls._default_manager.filter(deleted_at__isnull=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
