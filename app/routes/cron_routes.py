import hmac
from datetime import datetime

from flask import Blueprint, current_app, request, jsonify

from app.services.schedule_service import publish_scheduled_posts


cron_bp = Blueprint("cron", __name__)


def _authorized():
    secret = current_app.config.get("CRON_SECRET")
    if not secret:
        return False
    expected = f"Bearer {secret}"
    provided = request.headers.get("Authorization", "")
    return hmac.compare_digest(provided.encode(), expected.encode())


@cron_bp.route("/cron/publish-scheduled", methods=["POST"])
def publish_scheduled():
    if not _authorized():
        return jsonify({"error": "Unauthorized"}), 401

    now = datetime.utcnow()
    published = publish_scheduled_posts(now)
    return jsonify({
        "success": True,
        "published": published,
        "timestamp": now.isoformat() + "Z",
    }), 200


@cron_bp.route("/cron/publish-scheduled", methods=["GET"])
def usage():
    return jsonify({
        "endpoint": "/api/cron/publish-scheduled",
        "method": "POST",
        "authorization": "Bearer <CRON_SECRET>",
        "description": "Publishes every post whose scheduled time has passed",
    }), 200
