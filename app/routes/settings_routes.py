from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.schemas.settings_schema import AccountSettingsSchema, NotificationSettingsSchema
from app.services import settings_service
from app.services.errors import NotFoundError


settings_bp = Blueprint("settings", __name__)


@settings_bp.route("/settings/notifications", methods=["GET"])
@jwt_required()
def get_notifications():
    try:
        return jsonify(settings_service.get_notification_settings(get_jwt_identity())), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@settings_bp.route("/settings/notifications", methods=["PUT"])
@jwt_required()
def update_notifications():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON body"}), 400

    payload = NotificationSettingsSchema().load(data)

    try:
        settings = settings_service.update_notification_settings(get_jwt_identity(), payload)
        return jsonify({"success": True, "settings": settings}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@settings_bp.route("/settings/account", methods=["PUT"])
@jwt_required()
def update_account():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON body"}), 400

    payload = AccountSettingsSchema().load(data)

    try:
        account = settings_service.update_account(
            get_jwt_identity(),
            payload["display_name"],
            email=payload.get("email"),
        )
        return jsonify({"success": True, "account": account}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
