from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.services import analytics_service
from app.services.errors import NotFoundError, PermissionDeniedError


analytics_bp = Blueprint("analytics", __name__)


@analytics_bp.route("/analytics/<any(view, read):event>", methods=["POST"])
def track(event):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    try:
        return jsonify(analytics_service.track_event(event, data.get("post_id"))), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@analytics_bp.route("/analytics/<int:post_id>", methods=["GET"])
@jwt_required()
def daily_series(post_id):
    try:
        return jsonify(analytics_service.get_daily_series(get_jwt_identity(), post_id)), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": str(e)}), 403


@analytics_bp.route("/analytics/<int:post_id>/summary", methods=["GET"])
@jwt_required()
def summary(post_id):
    try:
        return jsonify(analytics_service.get_summary(get_jwt_identity(), post_id)), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": str(e)}), 403
