from flask import Blueprint, request, jsonify

from app.extensions.extensions import limiter
from app.schemas.settings_schema import WaitlistSchema
from app.services import waitlist_service


waitlist_bp = Blueprint("waitlist", __name__)


@waitlist_bp.route("/waitlist", methods=["POST"])
@limiter.limit("5 per 15 minutes")
def join_waitlist():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON body"}), 400

    errors = WaitlistSchema().validate(data)
    if errors:
        return jsonify({"error": "Valid email address is required"}), 400

    payload, created = waitlist_service.join_waitlist(data["email"])
    return jsonify(payload), 201 if created else 200


@waitlist_bp.route("/waitlist", methods=["GET"])
def waitlist_status():
    return jsonify(waitlist_service.waitlist_status()), 200
