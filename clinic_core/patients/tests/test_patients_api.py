from unittest import mock

import pytest
from django.db import DatabaseError

from clinic_core.patients.models import EmergencyContact, Patient
from clinic_core.tests.helpers import bearer, error_of

pytestmark = pytest.mark.django_db

URL = "/api/v1/patients/"


def _create(client, payload):
    r = client.post(URL, payload, format="json")
    assert r.status_code == 201, r.content
    return r.json()["id"]


# -----------------------------
# authorization
# -----------------------------

def test_missing_token_is_unauthenticated(api_client, fake_identity_service):
    r = api_client.get(URL, {"limit": 10})

    assert r.status_code == 401
    assert error_of(r)["code"] == "unauthenticated"
    assert r["WWW-Authenticate"] == "Bearer"
    assert fake_identity_service == []


def test_rejected_token_is_unauthenticated(api_client):
    r = api_client.get(URL, {"limit": 10}, **bearer("forged"))

    assert r.status_code == 401
    assert error_of(r)["code"] == "unauthenticated"


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", URL),
        ("get", URL + "1/"),
        ("post", URL),
        ("put", URL + "1/"),
        ("delete", URL + "1/"),
    ],
)
def test_non_admin_is_denied(doctor_client, method, path):
    r = getattr(doctor_client, method)(path, {}, format="json")

    assert r.status_code == 403
    assert error_of(r)["code"] == "permission_denied"
    assert error_of(r)["message"] == "You don't have enough permission to access this resource"


def test_denied_create_writes_nothing(doctor_client, patient_payload):
    r = doctor_client.post(URL, patient_payload, format="json")

    assert r.status_code == 403
    assert Patient.objects.count() == 0


def test_every_call_verifies_the_token(admin_client, fake_identity_service):
    admin_client.get(URL, {"limit": 10})
    admin_client.get(URL, {"limit": 10})

    assert fake_identity_service == ["admin-token", "admin-token"]


# -----------------------------
# CRUD
# -----------------------------

def test_create_and_get(admin_client, patient_payload):
    pid = _create(admin_client, patient_payload)

    r = admin_client.get(f"{URL}{pid}/")

    assert r.status_code == 200, r.content
    body = r.json()
    assert body["id"] == pid
    assert body["active"] is True
    assert body["name"] == "John Doe"
    assert body["gender"] == "MALE"
    assert body["birth_date"] == "1990-05-17"
    assert isinstance(body["age"], int)
    assert body["emergency_contacts"] == patient_payload["emergency_contacts"]
    assert "created_at" not in body


def test_create_invalid_payload_reports_every_field(admin_client, patient_payload):
    payload = {
        **patient_payload,
        "name": "",
        "phone_number": "12345",
        "emergency_contacts": [{"name": "X", "closeness": "friend", "phone": "nope"}],
    }

    r = admin_client.post(URL, payload, format="json")

    assert r.status_code == 400
    err = error_of(r)
    assert err["code"] == "invalid_argument"
    assert {"name", "phone_number", "emergency_contacts.0.phone"} <= set(err["details"])
    assert Patient.objects.count() == 0


def test_create_bad_birth_date(admin_client, patient_payload):
    r = admin_client.post(URL, {**patient_payload, "birth_date": "17.05.1990"}, format="json")

    assert r.status_code == 400
    assert error_of(r)["message"].startswith("failed to parse birth date: ")


def test_create_unknown_gender(admin_client, patient_payload):
    r = admin_client.post(URL, {**patient_payload, "gender": "OTHER"}, format="json")

    assert r.status_code == 400
    assert error_of(r)["code"] == "invalid_argument"


def test_create_storage_failure_is_internal(admin_client, patient_payload):
    with mock.patch.object(EmergencyContact, "save", side_effect=DatabaseError("disk full")):
        r = admin_client.post(URL, patient_payload, format="json")

    assert r.status_code == 500
    assert error_of(r)["code"] == "internal"
    assert error_of(r)["message"] == "failed to create a patient: disk full"
    assert Patient.objects.count() == 0


def test_get_unknown_is_not_found(admin_client):
    r = admin_client.get(f"{URL}12345/")

    assert r.status_code == 404
    assert error_of(r)["code"] == "not_found"


def test_update_replaces_patient(admin_client, patient_payload):
    pid = _create(admin_client, patient_payload)
    payload = {
        **patient_payload,
        "name": "John Q. Doe",
        "emergency_contacts": [{"name": "Ann Roe", "closeness": "sister", "phone": "+14155550199"}],
    }

    r = admin_client.put(f"{URL}{pid}/", payload, format="json")

    assert r.status_code == 200, r.content
    assert r.json() == {"id": pid}
    body = admin_client.get(f"{URL}{pid}/").json()
    assert body["name"] == "John Q. Doe"
    assert body["emergency_contacts"] == payload["emergency_contacts"]


def test_update_zero_id_is_invalid(admin_client, patient_payload):
    r = admin_client.put(f"{URL}0/", patient_payload, format="json")

    assert r.status_code == 400
    assert error_of(r)["message"] == "id has to be a non-zero integer"


def test_update_body_id_must_match_path(admin_client, patient_payload):
    pid = _create(admin_client, patient_payload)

    r = admin_client.put(f"{URL}{pid}/", {**patient_payload, "id": pid + 1}, format="json")

    assert r.status_code == 400
    assert error_of(r)["code"] == "invalid_argument"


def test_update_unknown_is_not_found(admin_client, patient_payload):
    r = admin_client.put(f"{URL}999/", patient_payload, format="json")

    assert r.status_code == 404


def test_delete_then_everything_is_not_found(admin_client, patient_payload):
    pid = _create(admin_client, patient_payload)

    r = admin_client.delete(f"{URL}{pid}/")
    assert r.status_code == 204

    assert admin_client.get(f"{URL}{pid}/").status_code == 404
    assert admin_client.put(f"{URL}{pid}/", patient_payload, format="json").status_code == 404
    assert admin_client.delete(f"{URL}{pid}/").status_code == 404


# -----------------------------
# ids listing
# -----------------------------

def test_list_ids(admin_client, patient_payload):
    ids = [_create(admin_client, patient_payload) for _ in range(3)]
    admin_client.delete(f"{URL}{ids[1]}/")

    r = admin_client.get(URL, {"offset": 0, "limit": 10})

    assert r.status_code == 200
    assert r.json() == {"count": 2, "results": [ids[0], ids[2]]}


@pytest.mark.parametrize(
    "params, message",
    [
        ({"offset": -1, "limit": 10}, "offset has to be a non-negative integer"),
        ({"offset": 0, "limit": 51}, "maximum allowed limit values is 50"),
        ({"offset": 0}, "limit has to be a positive integer"),
    ],
)
def test_list_ids_bounds(admin_client, params, message):
    r = admin_client.get(URL, params)

    assert r.status_code == 400
    assert error_of(r)["code"] == "invalid_argument"
    assert error_of(r)["message"] == message


def test_list_ids_non_integer_limit(admin_client):
    r = admin_client.get(URL, {"limit": "ten"})

    assert r.status_code == 400
    assert "limit" in error_of(r)["details"]


def test_create_rejects_padded_values(admin_client, patient_payload):
    payload = {
        **patient_payload,
        "name": "a" * 100 + " ",
        "phone_number": " +14155552671 ",
        "languages": ["x" * 100 + "    "],
        "emergency_contacts": [{"name": "Jane Doe", "closeness": "spouse", "phone": "+14155550100 "}],
    }

    r = admin_client.post(URL, payload, format="json")

    assert r.status_code == 400
    err = error_of(r)
    assert err["code"] == "invalid_argument"
    assert {"name", "phone_number", "languages.0", "emergency_contacts.0.phone"} <= set(err["details"])
    assert Patient.objects.count() == 0


def test_update_rejects_padded_phone(admin_client, patient_payload):
    pid = _create(admin_client, patient_payload)

    r = admin_client.put(f"{URL}{pid}/", {**patient_payload, "phone_number": "+14155552671 "}, format="json")

    assert r.status_code == 400
    assert error_of(r)["code"] == "invalid_argument"
    assert admin_client.get(f"{URL}{pid}/").json()["phone_number"] == "+14155552671"


def test_create_rejects_unpadded_birth_date(admin_client, patient_payload):
    r = admin_client.post(URL, {**patient_payload, "birth_date": "1990-5-7"}, format="json")

    assert r.status_code == 400
    assert error_of(r)["message"].startswith("failed to parse birth date: ")
