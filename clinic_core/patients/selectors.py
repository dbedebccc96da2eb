# clinic_core/patients/selectors.py
from __future__ import annotations

from django.db.models import Prefetch, QuerySet

from clinic_core.common.api.pagination import IdPage, check_page_bounds
from clinic_core.patients.domain import PatientRecord
from clinic_core.patients.models import EmergencyContact, Patient
from clinic_core.patients.search import build_prefix_query, rank_by_relevance
from clinic_core.patients.translators import patient_from_row


class PatientNotFound(Exception):
    pass


def visible_patients() -> QuerySet[Patient]:
    """Every read path starts here: soft-deleted rows are never returned."""
    return Patient.visible()


def get_patient(*, patient_id: int) -> PatientRecord:
    row = (
        visible_patients()
        .prefetch_related(
            Prefetch("emergency_contacts", queryset=EmergencyContact.objects.order_by("id"))
        )
        .filter(id=patient_id)
        .first()
    )
    if row is None:
        raise PatientNotFound()
    return patient_from_row(row)


def search_patients(*, search: str | None = None) -> QuerySet[Patient]:
    """
    Filter shared by the id page and its count.
    - with search text: matches ranked by relevance (then id)
    - without: all visible patients ordered by id
    """
    qs = visible_patients()
    if build_prefix_query(search) is None:
        return qs.order_by("id")
    return rank_by_relevance(qs, search)


def list_patient_ids(*, offset: int, limit: int, search: str | None = None) -> IdPage:
    check_page_bounds(offset=offset, limit=limit)

    qs = search_patients(search=search)
    ids = list(qs.values_list("id", flat=True)[offset:offset + limit])
    return IdPage(count=qs.count(), results=ids)
