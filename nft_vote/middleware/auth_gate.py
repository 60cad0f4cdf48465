"""
Bearer-token gate for protected and admin paths.

Per request: no bearer header -> 401, token rejected by the token service ->
401, admin path without the admin role claim -> 403, otherwise the token
claims are exposed to the route as ``g.identity``.
"""

from flask import current_app, g, request

from ..errors import error_payload
from ..exceptions import AuthenticationError
from ..models.user import ROLE_ADMIN
from ..services import get_services

PROTECTED_PATHS = ("/api/auth/verify",)
PROTECTED_PREFIXES = ("/api/nft/", "/api/voting/cast-vote")
ADMIN_PREFIXES = ("/api/admin/",)


def is_admin_path(path: str) -> bool:
    return path.startswith(ADMIN_PREFIXES)


def is_protected_path(path: str) -> bool:
    return path in PROTECTED_PATHS or path.startswith(PROTECTED_PREFIXES) or is_admin_path(path)


def _reject(code: str, message: str, status: int):
    response, status = error_payload(code, message, status=status)
    response.status_code = status
    if status == 401:
        response.headers["WWW-Authenticate"] = "Bearer"
    return response


def current_identity() -> dict:
    identity = g.get("identity")
    if identity is None:
        raise AuthenticationError("Authentication required", code="MISSING_TOKEN")
    return identity


def init_auth_gate(app):
    @app.before_request
    def _gate():
        if request.method == "OPTIONS" or not is_protected_path(request.path):
            return None

        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            return _reject("MISSING_TOKEN", "Authentication required", 401)

        claims = get_services().tokens.verify(header[len("Bearer "):].strip())
        if claims is None:
            return _reject("INVALID_TOKEN", "Invalid or expired token", 401)

        if is_admin_path(request.path) and claims.get("role") != ROLE_ADMIN:
            current_app.logger.warning(
                "Admin access denied user_id=%s path=%s", claims.get("userId"), request.path
            )
            return _reject("ADMIN_REQUIRED", "Admin access required", 403)

        g.identity = claims
        return None
