# clinic_core/iam/auth.py

from __future__ import annotations

import logging

from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed

from clinic_core.iam.identity import IdentityError, get_identity_client

logger = logging.getLogger(__name__)


class IdentityServiceAuthentication(BaseAuthentication):
    """
    Authenticate using:
      Authorization: Bearer <token>

    The token is verified by the identity service on every request.
    - No Authorization header -> None (DRF answers 401 through the permission layer)
    - Malformed header / rejected token / identity service down -> 401
    """
    keyword = "Bearer"

    def authenticate(self, request):
        header = get_authorization_header(request).split()
        if not header:
            return None

        if header[0].lower() != self.keyword.lower().encode():
            raise AuthenticationFailed("Invalid authorization header. Expected 'Bearer <token>'.")
        if len(header) != 2:
            raise AuthenticationFailed("Invalid authorization header. Token must not be empty or contain spaces.")

        try:
            token = header[1].decode()
        except UnicodeError:
            raise AuthenticationFailed("Invalid token header. Token string should not contain invalid characters.")

        try:
            claims = get_identity_client().verify_token(token)
        except IdentityError as e:
            logger.warning("token verification failed: %s", e)
            raise AuthenticationFailed(str(e))

        return claims, token

    def authenticate_header(self, request):
        return self.keyword
