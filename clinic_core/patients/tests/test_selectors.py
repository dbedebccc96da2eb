import pytest
from django.core.exceptions import ValidationError
from django.db import NotSupportedError, connection

from clinic_core.patients.domain import PersonalId
from clinic_core.patients.search import build_prefix_query
from clinic_core.patients.selectors import list_patient_ids
from clinic_core.patients.services import PatientService

pytestmark = pytest.mark.django_db

postgresql_only = pytest.mark.skipif(
    connection.vendor != "postgresql",
    reason="ranked search needs PostgreSQL (set TEST_DB_ENGINE=postgresql)",
)


@pytest.mark.parametrize(
    "offset, limit, message",
    [
        (-1, 10, "offset has to be a non-negative integer"),
        (0, 0, "limit has to be a positive integer"),
        (0, -5, "limit has to be a positive integer"),
        (0, 51, "maximum allowed limit values is 50"),
    ],
)
def test_page_bounds(offset, limit, message):
    with pytest.raises(ValidationError) as exc:
        list_patient_ids(offset=offset, limit=limit)
    assert exc.value.messages == [message]


def test_limit_50_is_allowed():
    page = list_patient_ids(offset=0, limit=50)
    assert page.count == 0
    assert page.results == []


def test_ids_are_ordered_and_paged(make_record):
    ids = [PatientService.create_patient(record=make_record(name=f"P{i}")) for i in range(5)]

    first = list_patient_ids(offset=0, limit=2)
    second = list_patient_ids(offset=2, limit=2)
    past_end = list_patient_ids(offset=10, limit=2)

    assert first.results == ids[:2]
    assert second.results == ids[2:4]
    assert past_end.results == []
    assert first.count == second.count == past_end.count == 5


def test_count_excludes_deleted(make_record):
    keep = PatientService.create_patient(record=make_record())
    gone = PatientService.create_patient(record=make_record())
    PatientService.delete_patient(patient_id=gone)

    page = list_patient_ids(offset=0, limit=10)

    assert page.results == [keep]
    assert page.count == 1


def test_search_without_words_lists_everything(make_record):
    ids = [PatientService.create_patient(record=make_record()) for _ in range(2)]

    page = list_patient_ids(offset=0, limit=10, search="  -- ")

    assert page.results == ids
    assert page.count == 2


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Jo", "jo:*"),
        ("  John   DOE ", "john:* & doe:*"),
        ("o'neil", "o:* & neil:*"),
        ("", None),
        (None, None),
        ("&|!", None),
    ],
)
def test_build_prefix_query(text, expected):
    assert build_prefix_query(text) == expected


@postgresql_only
def test_search_ranks_and_counts_matches(make_record):
    john = PatientService.create_patient(record=make_record(name="John Doe"))
    # "jo" also prefixes his personal id (weight A), so he outranks a name-only (B) match
    jon = PatientService.create_patient(
        record=make_record(name="Jon Smith", personal_id=PersonalId(id="JO77", type="passport"), special_note="")
    )
    PatientService.create_patient(record=make_record(name="Alice Brown", referred_by=""))

    page = list_patient_ids(offset=0, limit=10, search="Jo")

    assert page.results == [jon, john]
    assert page.count == 2

    narrowed = list_patient_ids(offset=0, limit=10, search="jo do")
    assert narrowed.results == [john]
    assert narrowed.count == 1


@postgresql_only
def test_search_weights_personal_id_above_note(make_record):
    by_note = PatientService.create_patient(
        record=make_record(name="Ann", personal_id=PersonalId(id="B456", type="passport"), special_note="see zz99")
    )
    by_id = PatientService.create_patient(
        record=make_record(name="Bob", personal_id=PersonalId(id="ZZ99", type="passport"), special_note="")
    )

    page = list_patient_ids(offset=0, limit=10, search="zz99")

    # personal id is weighted A, special note C
    assert page.results == [by_id, by_note]
    assert page.count == 2


@pytest.mark.skipif(connection.vendor == "postgresql", reason="checks the non-PostgreSQL path")
def test_search_requires_postgresql():
    with pytest.raises(NotSupportedError):
        list_patient_ids(offset=0, limit=10, search="jo")
