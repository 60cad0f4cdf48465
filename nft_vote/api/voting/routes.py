from flask import Blueprint, request, current_app
from flasgger import swag_from

from ...exceptions import DuplicateVoteError, InvalidOptionError, NotEligibleError
from ...schemas.results import OptionResultSchema
from ...schemas.vote import CastVoteSchema
from ...services import get_services
from ...utils.validation import validate_or_abort
from ..nft.routes import resolve_target_user

voting_bp = Blueprint("voting", __name__)
cast_vote_schema = CastVoteSchema()
option_results_schema = OptionResultSchema(many=True)


@voting_bp.post("/cast-vote")
@swag_from({
    "tags": ["Voting"],
    "security": [{"BearerAuth": []}],
    "summary": "Cast the caller's single vote",
    "description": "NFT ownership is re-checked before the vote is recorded. Votes cannot be changed.",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {
                "optionId": {"type": "string", "example": "1"},
                "userId": {"type": "string", "example": "user_3f9c0a7e21b44d0c"}
            },
            "required": ["optionId"]
        }
    }],
    "responses": {
        200: {"description": "Vote recorded"},
        400: {"description": "Missing fields, unknown option, or already voted"},
        401: {"description": "Unauthorized"},
        403: {"description": "Not eligible"},
        404: {"description": "User not found"}
    }
})
def cast_vote():
    payload = request.get_json(silent=True) or {}
    payload = validate_or_abort(cast_vote_schema, payload)

    user = resolve_target_user(payload.get("user_id"))
    ledger = get_services().ledger

    option_id = payload["option_id"]
    if ledger.get_option(option_id) is None:
        raise InvalidOptionError(option_id)

    # Cheap early exit; the ledger re-checks atomically when writing.
    if ledger.has_voted(user.id):
        raise DuplicateVoteError(user.id)

    eligibility = get_services().eligibility.check(user)
    if not eligibility.eligible:
        current_app.logger.info("Vote refused for user_id=%s: not eligible (%s)", user.id, eligibility.source)
        raise NotEligibleError(user.id)

    ledger.cast_vote(user.id, option_id)
    return {"success": True, "message": "Vote recorded successfully"}, 200


@voting_bp.get("/results")
@swag_from({
    "tags": ["Voting"],
    "summary": "Current vote totals per option",
    "responses": {
        200: {
            "description": "Results",
            "schema": {
                "type": "object",
                "properties": {
                    "success": {"type": "boolean"},
                    "results": {"type": "array", "items": {"$ref": "#/definitions/VotingOption"}}
                }
            }
        },
        500: {"description": "Server error"}
    }
})
def results():
    rows = get_services().ledger.results()
    return {"success": True, "results": option_results_schema.dump(rows)}, 200
