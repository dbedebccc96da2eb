# clinic_core/conftest.py
from datetime import date

import pytest
from rest_framework.test import APIClient

from clinic_core.iam.identity import IdentityClaims, IdentityClient, InvalidTokenError, get_identity_client
from clinic_core.patients.domain import EmergencyContact, Gender, PatientRecord, PersonalId

# token -> claims the fake identity service answers with
FAKE_TOKENS = {
    "admin-token": IdentityClaims(subject_id="u-admin", roles=frozenset({"admin"})),
    "doctor-token": IdentityClaims(subject_id="u-doctor", roles=frozenset({"doctor"})),
}


@pytest.fixture(autouse=True)
def fake_identity_service(monkeypatch):
    """
    Replace the identity service: known tokens verify, anything else is rejected.
    Every verified token is recorded in the returned list.
    """
    get_identity_client.cache_clear()
    seen = []

    def verify_token(self, token):
        seen.append(token)
        try:
            return FAKE_TOKENS[token]
        except KeyError:
            raise InvalidTokenError("token is not valid")

    monkeypatch.setattr(IdentityClient, "verify_token", verify_token)
    yield seen
    get_identity_client.cache_clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_client():
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION="Bearer admin-token")
    return c


@pytest.fixture
def doctor_client():
    c = APIClient()
    c.credentials(HTTP_AUTHORIZATION="Bearer doctor-token")
    return c


@pytest.fixture
def make_record():
    def _make(**overrides):
        data = dict(
            name="John Doe",
            personal_id=PersonalId(id="A123", type="passport"),
            gender=Gender.MALE,
            birth_date=date(1990, 5, 17),
            phone_number="+14155552671",
            languages=["en", "fr"],
            referred_by="Dr. Smith",
            special_note="allergic to penicillin",
            emergency_contacts=[
                EmergencyContact(name="Jane Doe", closeness="spouse", phone="+14155550100"),
                EmergencyContact(name="Jim Doe", closeness="brother", phone="+14155550101"),
            ],
        )
        data.update(overrides)
        return PatientRecord(**data)

    return _make


@pytest.fixture
def patient_payload():
    return {
        "name": "John Doe",
        "personal_id": {"id": "A123", "type": "passport"},
        "gender": "MALE",
        "phone_number": "+14155552671",
        "languages": ["en", "fr"],
        "birth_date": "1990-05-17",
        "referred_by": "Dr. Smith",
        "special_note": "allergic to penicillin",
        "emergency_contacts": [
            {"name": "Jane Doe", "closeness": "spouse", "phone": "+14155550100"},
            {"name": "Jim Doe", "closeness": "brother", "phone": "+14155550101"},
        ],
    }
