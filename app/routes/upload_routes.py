from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.extensions.extensions import limiter
from app.services import upload_service
from app.services.errors import MediaStorageError, NotFoundError


upload_bp = Blueprint("uploads", __name__)


@upload_bp.route("/uploads/<kind>", methods=["POST"])
@jwt_required()
@limiter.limit("10 per hour")
def upload(kind):
    file = request.files.get("file")

    try:
        result = upload_service.upload_file(get_jwt_identity(), kind, file)
        return jsonify(result), 201
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except MediaStorageError as e:
        return jsonify({"error": str(e)}), 503
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
