from flask import Blueprint, request, current_app, abort
from flasgger import swag_from

from ...middleware.auth_gate import current_identity
from ...schemas.auth import SendCodeSchema, VerifyCodeSchema, WalletConnectSchema
from ...schemas.user import UserSchema
from ...services import get_services
from ...services.code_store import normalize_email
from ...utils.mailer import send_code_email
from ...utils.validation import validate_or_abort

auth_bp = Blueprint("auth", __name__)

send_code_schema = SendCodeSchema()
verify_code_schema = VerifyCodeSchema()
wallet_connect_schema = WalletConnectSchema()
user_schema = UserSchema()


def _login_response(user):
    token = get_services().tokens.issue(user)
    return {"success": True, "token": token, "user": user_schema.dump(user)}, 200


@auth_bp.post("/send-code")
@swag_from({
    "tags": ["Auth"],
    "summary": "Email a one-time login code",
    "description": "Issues a 6-digit code valid for 10 minutes. A new request replaces any pending code.",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {"email": {"type": "string", "example": "voter@example.com"}},
            "required": ["email"]
        }
    }],
    "responses": {
        200: {"description": "Code sent"},
        400: {"description": "Invalid email", "schema": {"$ref": "#/definitions/ErrorResponse"}},
        500: {"description": "Delivery failed"}
    }
})
def send_code():
    payload = request.get_json(silent=True) or {}
    payload = validate_or_abort(send_code_schema, payload)

    email = normalize_email(payload["email"])
    code = get_services().codes.issue(email)

    try:
        send_code_email(email, code)
    except Exception:
        current_app.logger.exception("Failed to deliver verification code to %s", email)
        abort(500, description="Failed to send verification email")

    return {"success": True, "message": "Verification code sent"}, 200


@auth_bp.post("/verify-code")
@swag_from({
    "tags": ["Auth"],
    "summary": "Exchange a one-time code for a session token",
    "description": "Creates the user on first login. A code can be used once.",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {
                "email": {"type": "string", "example": "voter@example.com"},
                "code": {"type": "string", "example": "042917"}
            },
            "required": ["email", "code"]
        }
    }],
    "responses": {
        200: {"description": "Token issued"},
        400: {"description": "Missing fields, or invalid/expired code"}
    }
})
def verify_code():
    payload = request.get_json(silent=True) or {}
    payload = validate_or_abort(verify_code_schema, payload)

    email = normalize_email(payload["email"])
    services = get_services()

    if not services.codes.verify(email, payload["code"]):
        current_app.logger.info("Rejected verification code for %s", email)
        abort(400, description={"code": "INVALID_CODE", "message": "Invalid or expired verification code"})

    user = services.users.get_or_create_by_email(email)
    current_app.logger.info("Email login user_id=%s", user.id)
    return _login_response(user)


@auth_bp.post("/wallet-connect")
@swag_from({
    "tags": ["Auth"],
    "summary": "Log in with a wallet address",
    "description": (
        "The signature is accepted but NOT verified: this flow proves nothing about "
        "control of the wallet and must not be relied on as real authentication."
    ),
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {
                "walletType": {"type": "string", "example": "nami"},
                "walletAddress": {"type": "string", "example": "addr1q..."},
                "signature": {"type": "string"}
            },
            "required": ["walletType"]
        }
    }],
    "responses": {
        200: {"description": "Token issued"},
        400: {"description": "Missing walletType or walletAddress"}
    }
})
def wallet_connect():
    payload = request.get_json(silent=True) or {}
    payload = validate_or_abort(wallet_connect_schema, payload)

    wallet_address = payload.get("wallet_address") or current_app.config.get("WALLET_DEMO_ADDRESS")
    if not wallet_address:
        abort(400, description={"code": "VALIDATION_ERROR", "message": "walletAddress is required"})

    current_app.logger.warning(
        "Wallet login for %s (%s) without signature verification",
        wallet_address, payload["wallet_type"],
    )
    user = get_services().users.get_or_create_by_wallet(wallet_address)
    return _login_response(user)


@auth_bp.get("/verify")
@swag_from({
    "tags": ["Auth"],
    "security": [{"BearerAuth": []}],
    "summary": "Resolve the current session token to its user",
    "responses": {
        200: {"description": "User", "schema": {"$ref": "#/definitions/User"}},
        401: {"description": "Missing or invalid token"},
        404: {"description": "User not found"}
    }
})
def verify():
    identity = current_identity()
    user = get_services().users.get_by_id(identity["userId"])
    if not user:
        abort(404, description={"code": "USER_NOT_FOUND", "message": "User not found"})

    return user_schema.dump(user), 200
