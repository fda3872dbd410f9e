"""Request authorization.

Every request passes through :func:`authorize_request` before its view runs.
The access table maps an endpoint, or failing that a blueprint, to the set of
roles allowed to call it. ``PUBLIC`` entries skip token verification.
"""
from __future__ import annotations

from dataclasses import dataclass

from flask import g, request
from flask_jwt_extended import verify_jwt_in_request, get_jwt, get_jwt_identity

from ..errors import NotAuthenticated, NotAuthorized
from ..models import UserRole

PUBLIC = None
ANY_ROLE = frozenset(UserRole)
STUDENT_ONLY = frozenset({UserRole.student})
ADMIN_ONLY = frozenset({UserRole.admin})

ENDPOINT_ACCESS = {
    "static": PUBLIC,
    "show_routes": PUBLIC,
    "health.health": PUBLIC,
    "auth.login": PUBLIC,
    # refresh-token endpoints verify their own token type
    "auth.refresh": PUBLIC,
    "auth.logout_refresh": PUBLIC,
    "students.register_student": PUBLIC,
    "courses.list_courses": PUBLIC,
    "courses.course_stats": PUBLIC,
}

BLUEPRINT_ACCESS = {
    "auth": ANY_ROLE,
    "students": STUDENT_ONLY,
    "preselection": STUDENT_ONLY,
    "votes": STUDENT_ONLY,
    "stats": ANY_ROLE,
    "admin": ADMIN_ONLY,
}


@dataclass(frozen=True)
class Principal:
    id: int
    email: str | None
    role: UserRole


def required_roles(endpoint: str | None, blueprint: str | None) -> frozenset:
    if endpoint in ENDPOINT_ACCESS:
        return ENDPOINT_ACCESS[endpoint]
    top = blueprint.split(".")[0] if blueprint else None
    return BLUEPRINT_ACCESS.get(top, ANY_ROLE)


def authorize_request():
    # unmatched URLs fall through to the 404/405 handlers
    if request.endpoint is None:
        return None

    roles = required_roles(request.endpoint, request.blueprint)
    if roles is PUBLIC:
        return None

    verify_jwt_in_request()

    claims = get_jwt() or {}
    try:
        role = UserRole(claims.get("role"))
    except ValueError:
        raise NotAuthenticated("Token sin rol válido") from None

    if role not in roles:
        raise NotAuthorized("Acceso denegado")

    g.principal = Principal(id=int(get_jwt_identity()), email=claims.get("email"), role=role)
    return None


def current_principal() -> Principal:
    principal = g.get("principal")
    if principal is None:
        raise NotAuthenticated("No autenticado")
    return principal
