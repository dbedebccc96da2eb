"""
Client for the identity service that owns token issuance and validation.

The patients service never decodes tokens itself: every call hands the opaque
token to the identity service and receives the subject id and the role set.
No caching across calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class IdentityError(Exception):
    """Base class for identity verification failures."""


class InvalidTokenError(IdentityError):
    """The identity service rejected the token (malformed, expired, revoked)."""


class IdentityServiceUnavailable(IdentityError):
    """The identity service could not be reached or answered with an error."""


@dataclass(frozen=True)
class IdentityClaims:
    """Verified identity attached to each request as request.user."""
    subject_id: str
    roles: frozenset = field(default_factory=frozenset)

    # DRF / Django treat request.user through these attributes
    is_authenticated = True
    is_anonymous = False

    def has_role(self, role: str) -> bool:
        return role in self.roles

    def __str__(self) -> str:
        return self.subject_id


class IdentityClient:
    """Thin synchronous HTTP client; one POST per verification."""

    def __init__(self, *, base_url: str, verify_path: str = "/api/v1/tokens/verify", timeout: float | None = None):
        self.base_url = base_url.rstrip("/")
        self.verify_path = "/" + verify_path.lstrip("/")
        self.timeout = timeout

    @property
    def verify_url(self) -> str:
        return f"{self.base_url}{self.verify_path}"

    def verify_token(self, token: str) -> IdentityClaims:
        if not token:
            raise InvalidTokenError("token is missing")

        try:
            response = requests.post(self.verify_url, json={"token": token}, timeout=self.timeout)
        except requests.RequestException as e:
            raise IdentityServiceUnavailable(f"identity service is unreachable: {e}") from e

        if response.status_code in (400, 401, 403, 404):
            raise InvalidTokenError(_error_message(response) or "token is not valid")
        if response.status_code >= 300:
            raise IdentityServiceUnavailable(
                f"identity service answered with status {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise IdentityServiceUnavailable("identity service returned a non-JSON body") from e

        return _claims_from_payload(payload)


def _error_message(response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        msg = payload.get("detail") or payload.get("message") or payload.get("error")
        return str(msg) if msg else None
    return None


def _claims_from_payload(payload) -> IdentityClaims:
    if not isinstance(payload, dict):
        raise InvalidTokenError("identity payload is not an object")

    subject_id = payload.get("subject_id") or payload.get("sub") or payload.get("user_id")
    if not subject_id:
        raise InvalidTokenError("identity payload has no subject")

    roles = payload.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    if not isinstance(roles, (list, tuple)):
        raise InvalidTokenError("identity payload roles must be a list")

    return IdentityClaims(subject_id=str(subject_id), roles=frozenset(str(r) for r in roles))


@lru_cache(maxsize=1)
def get_identity_client() -> IdentityClient:
    """Process-wide client built from settings (holds no per-request state)."""
    return IdentityClient(
        base_url=settings.IDENTITY_SERVICE_URL,
        verify_path=settings.IDENTITY_VERIFY_PATH,
        timeout=settings.IDENTITY_SERVICE_TIMEOUT,
    )
