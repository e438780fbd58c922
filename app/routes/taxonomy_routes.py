from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.schemas.taxonomy_schema import CategoryInputSchema, TagInputSchema
from app.services import taxonomy_service
from app.services.auth_service import require_admin
from app.services.errors import ConflictError, NotFoundError, PermissionDeniedError


taxonomy_bp = Blueprint("taxonomy", __name__)


@taxonomy_bp.route("/tags", methods=["GET"])
def list_tags():
    return jsonify(taxonomy_service.list_tags()), 200


@taxonomy_bp.route("/tags", methods=["POST"])
@jwt_required()
def create_tag():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON body"}), 400

    payload = TagInputSchema().load(data)

    try:
        tag, created = taxonomy_service.create_tag(payload["name"])
        return jsonify(tag), 201 if created else 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@taxonomy_bp.route("/categories", methods=["GET"])
def list_categories():
    return jsonify(taxonomy_service.list_categories()), 200


@taxonomy_bp.route("/categories/<slug>", methods=["GET"])
def get_category(slug):
    try:
        return jsonify(taxonomy_service.get_category(slug)), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@taxonomy_bp.route("/categories", methods=["POST"])
@jwt_required()
def create_category():
    try:
        require_admin(get_jwt_identity())
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": str(e)}), 403

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON body"}), 400

    payload = CategoryInputSchema().load(data)

    try:
        category = taxonomy_service.create_category(
            payload["name"],
            slug=payload.get("slug"),
            description=payload.get("description"),
        )
        return jsonify(category), 201
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
