import pytest
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.test import APIRequestFactory

from clinic_core.iam.auth import IdentityServiceAuthentication
from clinic_core.iam.identity import IdentityClient, IdentityServiceUnavailable


def _request(authorization=None):
    headers = {}
    if authorization is not None:
        headers["HTTP_AUTHORIZATION"] = authorization
    return APIRequestFactory().get("/api/v1/patients/", **headers)


def test_no_header_is_anonymous():
    assert IdentityServiceAuthentication().authenticate(_request()) is None


def test_valid_bearer_token(fake_identity_service):
    claims, token = IdentityServiceAuthentication().authenticate(_request("Bearer admin-token"))

    assert token == "admin-token"
    assert claims.subject_id == "u-admin"
    assert "admin" in claims.roles
    assert fake_identity_service == ["admin-token"]


@pytest.mark.parametrize(
    "header",
    ["Basic abc", "Bearer", "Bearer a b", "Token admin-token"],
)
def test_malformed_header_fails(header, fake_identity_service):
    with pytest.raises(AuthenticationFailed):
        IdentityServiceAuthentication().authenticate(_request(header))
    assert fake_identity_service == []


def test_rejected_token_fails():
    with pytest.raises(AuthenticationFailed):
        IdentityServiceAuthentication().authenticate(_request("Bearer unknown"))


def test_identity_service_down_fails(monkeypatch):
    def unavailable(self, token):
        raise IdentityServiceUnavailable("identity service is unreachable: refused")

    monkeypatch.setattr(IdentityClient, "verify_token", unavailable)

    with pytest.raises(AuthenticationFailed, match="unreachable"):
        IdentityServiceAuthentication().authenticate(_request("Bearer admin-token"))


def test_authenticate_header_declares_bearer():
    assert IdentityServiceAuthentication().authenticate_header(_request()) == "Bearer"
