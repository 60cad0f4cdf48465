from datetime import datetime
from flask import Blueprint, Response, current_app
from flasgger import swag_from

from ...middleware.auth_gate import current_identity
from ...schemas.results import AdminStatsSchema
from ...services import get_services
from ...utils.export import results_to_csv

admin_bp = Blueprint("admin", __name__)
admin_stats_schema = AdminStatsSchema()


def _rounded_percentage(votes: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(votes * 100 / total + 0.5)


@admin_bp.get("/stats")
@swag_from({
    "tags": ["Admin"],
    "security": [{"BearerAuth": []}],
    "summary": "Voting and user statistics (admin only)",
    "responses": {
        200: {"description": "Stats"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"}
    }
})
def stats():
    services = get_services()
    results = services.ledger.results()
    total_votes, recorded_votes = services.ledger.totals()

    current_app.logger.info("Admin stats viewed by user_id=%s", current_identity().get("userId"))

    return admin_stats_schema.dump({
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "total_users": services.users.count(),
        "users_by_auth_method": services.users.count_by_auth_method(),
        "total_votes": total_votes,
        "recorded_votes": recorded_votes,
        "voting_options": [
            {**row, "percentage": _rounded_percentage(row["votes"], total_votes)}
            for row in results
        ],
    }), 200


@admin_bp.get("/export")
@swag_from({
    "tags": ["Admin"],
    "security": [{"BearerAuth": []}],
    "summary": "Download voting results as CSV (admin only)",
    "produces": ["text/csv"],
    "responses": {
        200: {"description": "CSV file"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"}
    }
})
def export():
    identity = current_identity()
    exported_by = identity.get("email") or identity.get("walletAddress") or identity.get("userId")

    now = datetime.utcnow()
    body = results_to_csv(get_services().ledger.results(), exported_by=exported_by, now=now)

    current_app.logger.info("Results exported by user_id=%s", identity.get("userId"))
    return Response(
        body,
        status=200,
        mimetype="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="voting-results-{now.date().isoformat()}.csv"'
        },
    )
