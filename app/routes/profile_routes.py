from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from app.services import post_service, profile_service
from app.services.errors import MediaStorageError, NotFoundError


profile_bp = Blueprint("profiles", __name__)

PROFILE_FIELDS = (
    "display_name",
    "bio",
    "website_url",
    "twitter_handle",
    "github_username",
    "location",
)


@profile_bp.route("/profiles/me", methods=["GET"])
@jwt_required()
def get_my_profile():
    username = get_jwt_identity()
    try:
        return jsonify(profile_service.get_profile_by_username(username)), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@profile_bp.route("/profiles/me", methods=["PUT"])
@jwt_required()
def update_my_profile():
    username = get_jwt_identity()

    content_type = (request.content_type or "").lower()
    avatar = None

    if "multipart/form-data" in content_type:
        fields = {name: request.form.get(name) for name in PROFILE_FIELDS}
        avatar = request.files.get("avatar")
    else:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Invalid JSON body"}), 400
        fields = {name: data.get(name) for name in PROFILE_FIELDS}

    try:
        profile = profile_service.update_profile(username, fields, avatar=avatar)
        return jsonify(profile), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except MediaStorageError as e:
        return jsonify({"error": str(e)}), 503
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@profile_bp.route("/profiles/<username>", methods=["GET"])
def get_profile(username):
    try:
        return jsonify(profile_service.get_profile_by_username(username)), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@profile_bp.route("/profiles/<username>/posts", methods=["GET"])
def get_profile_posts(username):
    page = request.args.get("page", default=1, type=int)
    limit = request.args.get("limit", default=10, type=int)

    try:
        data = post_service.list_posts_by_username(username, page, limit)
        return jsonify(data), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
