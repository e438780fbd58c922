from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.extensions.extensions import limiter
from app.schemas.post_schema import MarkdownImportSchema, PostInputSchema, ScheduleInputSchema
from app.services import like_service, post_service, schedule_service
from app.services.errors import ConflictError, NotFoundError, PermissionDeniedError


post_bp = Blueprint("posts", __name__)


def _bool_arg(name):
    value = request.args.get(name)
    if value is None:
        return None
    return value.strip().lower() in {"1", "true", "yes"}


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    return data


@post_bp.route("/posts", methods=["GET"])
def list_posts():
    page = request.args.get("page", default=1, type=int)
    limit = request.args.get("limit", default=10, type=int)

    data = post_service.list_published_posts(
        page,
        limit,
        tag=request.args.get("tag"),
        category=request.args.get("category"),
        author=request.args.get("author"),
        featured=_bool_arg("featured"),
        search=(request.args.get("q") or "").strip() or None,
    )
    return jsonify(data), 200


@post_bp.route("/posts/me", methods=["GET"])
@jwt_required()
def list_my_posts():
    page = request.args.get("page", default=1, type=int)
    limit = request.args.get("limit", default=10, type=int)

    try:
        return jsonify(post_service.list_my_posts(get_jwt_identity(), page, limit)), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@post_bp.route("/posts/check-slug", methods=["GET"])
def check_slug():
    try:
        result = post_service.check_slug(
            request.args.get("slug", ""),
            exclude_post_id=request.args.get("exclude_id", type=int),
        )
        return jsonify(result), 200
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@post_bp.route("/posts/check-slug-impact", methods=["GET"])
@jwt_required()
def check_slug_impact():
    try:
        result = post_service.check_slug_impact(
            get_jwt_identity(),
            (request.args.get("current") or "").strip(),
            (request.args.get("new") or "").strip(),
        )
        return jsonify(result), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": str(e)}), 403
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@post_bp.route("/posts", methods=["POST"])
@jwt_required()
@limiter.limit("30 per hour")
def create_post():
    data = _json_body()
    if data is None:
        return jsonify({"error": "Invalid JSON body"}), 400

    payload = PostInputSchema().load(data)

    try:
        post = post_service.create_post(get_jwt_identity(), payload)
        return jsonify(post), 201
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@post_bp.route("/posts/<int:post_id>", methods=["GET"])
@jwt_required(optional=True)
def get_post(post_id):
    try:
        return jsonify(post_service.get_post(post_id, get_jwt_identity())), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@post_bp.route("/posts/slug/<slug>", methods=["GET"])
@jwt_required(optional=True)
def get_post_by_slug(slug):
    try:
        return jsonify(post_service.get_post_by_slug(slug, get_jwt_identity())), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@post_bp.route("/posts/<int:post_id>", methods=["PUT"])
@jwt_required()
def update_post(post_id):
    data = _json_body()
    if data is None:
        return jsonify({"error": "Invalid JSON body"}), 400

    payload = PostInputSchema(partial=True).load(data)

    try:
        post = post_service.update_post(get_jwt_identity(), post_id, payload)
        return jsonify(post), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": str(e)}), 403
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@post_bp.route("/posts/<int:post_id>", methods=["DELETE"])
@jwt_required()
def delete_post(post_id):
    try:
        post_service.delete_post(get_jwt_identity(), post_id)
        return jsonify({"message": "Post deleted"}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": str(e)}), 403


@post_bp.route("/posts/<int:post_id>/like", methods=["POST"])
@jwt_required()
@limiter.limit("50 per hour")
def toggle_like(post_id):
    try:
        return jsonify(like_service.toggle_like(get_jwt_identity(), post_id)), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@post_bp.route("/posts/<int:post_id>/like", methods=["GET"])
@jwt_required(optional=True)
def like_status(post_id):
    try:
        return jsonify(like_service.get_like_status(post_id, get_jwt_identity())), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@post_bp.route("/posts/<int:post_id>/schedule", methods=["POST"])
@jwt_required()
def schedule_post(post_id):
    data = _json_body()
    if data is None:
        return jsonify({"error": "Invalid JSON body"}), 400

    payload = ScheduleInputSchema().load(data)

    try:
        schedule = schedule_service.schedule_post(
            get_jwt_identity(),
            post_id,
            payload["publish_at"],
            payload["timezone"],
        )
        return jsonify(schedule), 201
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": str(e)}), 403
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@post_bp.route("/posts/<int:post_id>/schedule", methods=["GET"])
@jwt_required()
def get_schedule(post_id):
    try:
        return jsonify(schedule_service.get_schedule(get_jwt_identity(), post_id)), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": str(e)}), 403


@post_bp.route("/posts/<int:post_id>/schedule", methods=["DELETE"])
@jwt_required()
def cancel_schedule(post_id):
    try:
        schedule_service.cancel_schedule(get_jwt_identity(), post_id)
        return jsonify({"message": "Schedule cancelled"}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": str(e)}), 403


@post_bp.route("/import-markdown", methods=["POST"])
@jwt_required()
@limiter.limit("30 per hour")
def import_markdown():
    data = _json_body()
    if data is None:
        return jsonify({"error": "Invalid JSON body"}), 400

    payload = MarkdownImportSchema().load(data)

    try:
        post = post_service.import_markdown(
            get_jwt_identity(),
            payload["markdown"],
            title=payload.get("title"),
        )
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404

    return jsonify({
        "success": True,
        "post_id": post.id,
        "slug": post.slug,
        "redirect": f"/editor/{post.id}",
    }), 201
