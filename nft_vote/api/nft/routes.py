from flask import Blueprint, request, current_app
from flasgger import swag_from

from ...exceptions import AuthorizationError, UserNotFoundError
from ...middleware.auth_gate import current_identity
from ...models.user import ROLE_ADMIN
from ...schemas.vote import EligibilityCheckSchema
from ...services import get_services
from ...utils.validation import validate_or_abort

nft_bp = Blueprint("nft", __name__)
eligibility_check_schema = EligibilityCheckSchema()


def resolve_target_user(requested_user_id):
    """
    The user a request acts on: the caller, unless an admin names someone else.
    Raises 403 for non-admins naming another user and 404 for unknown users.
    """
    identity = current_identity()
    user_id = requested_user_id or identity["userId"]

    if user_id != identity["userId"] and identity.get("role") != ROLE_ADMIN:
        current_app.logger.warning(
            "user_id=%s tried to act for user_id=%s", identity["userId"], user_id
        )
        raise AuthorizationError("You can only act on your own account", code="FORBIDDEN_USER")

    user = get_services().users.get_by_id(user_id)
    if not user:
        raise UserNotFoundError(user_id)
    return user


@nft_bp.post("/check-eligibility")
@swag_from({
    "tags": ["NFT"],
    "security": [{"BearerAuth": []}],
    "summary": "Check whether a user holds an NFT of the target policy",
    "description": (
        "Wallet users are checked against the primary chain indexer, then the fallback indexer. "
        "Email users are checked against purchase records. If no source answers the user is "
        "reported as not eligible."
    ),
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": False,
        "schema": {
            "type": "object",
            "properties": {"userId": {"type": "string", "example": "user_3f9c0a7e21b44d0c"}}
        }
    }],
    "responses": {
        200: {"description": "Eligibility"},
        401: {"description": "Unauthorized"},
        403: {"description": "Another user's id"},
        404: {"description": "User not found"}
    }
})
def check_eligibility():
    payload = request.get_json(silent=True) or {}
    payload = validate_or_abort(eligibility_check_schema, payload)

    user = resolve_target_user(payload.get("user_id"))
    services = get_services()

    result = services.eligibility.check(user)
    has_voted = services.ledger.has_voted(user.id) if result.eligible else False

    return {
        "eligible": result.eligible,
        "nftData": result.to_dict(),
        "hasVoted": has_voted,
        "user": {
            "id": user.id,
            "email": user.email,
            "walletAddress": user.wallet_address,
        },
    }, 200
