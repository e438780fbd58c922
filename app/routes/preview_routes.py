from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.schemas.post_schema import PostReferenceSchema
from app.services import preview_service
from app.services.errors import NotFoundError, PermissionDeniedError
from app.services.preview_service import InvalidPreviewTokenError


preview_bp = Blueprint("preview", __name__)


@preview_bp.route("/preview", methods=["POST"])
@jwt_required()
def create_preview():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON body"}), 400

    payload = PostReferenceSchema().load(data)

    try:
        return jsonify(preview_service.create_preview(get_jwt_identity(), payload["post_id"])), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": str(e)}), 403


@preview_bp.route("/preview", methods=["GET"])
def get_preview():
    try:
        post = preview_service.get_preview(request.args.get("token", "").strip())
        return jsonify({"post": post}), 200
    except InvalidPreviewTokenError as e:
        return jsonify({"error": str(e)}), 401
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
