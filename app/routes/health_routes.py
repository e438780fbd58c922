from flask import Blueprint, jsonify

from app.services.health_service import check_health


health_bp = Blueprint("health", __name__)


@health_bp.route("/health", methods=["GET"])
def health():
    payload, healthy = check_health()
    return jsonify(payload), 200 if healthy else 500
