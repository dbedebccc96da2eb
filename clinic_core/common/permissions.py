# clinic_core/common/permissions.py

from __future__ import annotations

from typing import Set

from rest_framework.permissions import BasePermission

# Role names as issued by the identity service
ROLE_ADMIN = "admin"

PERMISSION_DENIED_MSG = "You don't have enough permission to access this resource"


def _principal_roles(user) -> Set[str]:
    """
    Resolve roles of the authenticated principal.

    The identity authentication attaches IdentityClaims as request.user,
    which carries the role set verified by the identity service.
    Anonymous or unauthenticated users have no roles.
    """
    if not user or not getattr(user, "is_authenticated", False):
        return set()

    roles = getattr(user, "roles", None) or ()
    return {str(r) for r in roles}


class BaseRolePermission(BasePermission):
    """
    Base permission class for role-based access control.

    Key behavior:
    - Requires an authenticated principal. When authentication is missing DRF
      answers 401 (the authenticator declares a WWW-Authenticate scheme),
      otherwise a missing role answers 403.
    - Uses allowed_roles_per_action for strict RBAC.
    - Unknown actions are denied.
    """
    message = PERMISSION_DENIED_MSG

    # Override in subclasses: dict of action -> set of allowed roles
    allowed_roles_per_action: dict[str, set[str]] = {}

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        # fallback inference when action isn't set
        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "DELETE":
            return "destroy"
        return None

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        allowed = self.allowed_roles_per_action.get(self._infer_action(request, view))
        if allowed is None:
            return False
        return bool(_principal_roles(user) & allowed)

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


class PatientPermission(BaseRolePermission):
    """Every patient aggregate operation is admin only."""
    allowed_roles_per_action = {
        "list": {ROLE_ADMIN},
        "retrieve": {ROLE_ADMIN},
        "create": {ROLE_ADMIN},
        "update": {ROLE_ADMIN},
        "destroy": {ROLE_ADMIN},
    }
