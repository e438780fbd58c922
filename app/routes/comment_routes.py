from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.extensions.extensions import limiter
from app.schemas.comment_schema import CommentInputSchema, StandaloneCommentInputSchema
from app.services import comment_service
from app.services.comment_service import serialize_comment
from app.services.errors import NotFoundError, PermissionDeniedError


comment_bp = Blueprint("comments", __name__)

comment_creation_limit = limiter.shared_limit("10 per 10 minutes", scope="comments")


@comment_bp.route("/posts/<int:post_id>/comments", methods=["POST"])
@jwt_required()
@comment_creation_limit
def create_comment(post_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON body"}), 400

    payload = CommentInputSchema().load(data)

    try:
        comment = comment_service.add_comment(
            get_jwt_identity(),
            post_id=post_id,
            body=payload["body"],
            parent_id=payload.get("parent_id"),
        )
        return jsonify({
            "id": comment.id,
            "message": "Comment submitted for moderation",
            "approved": comment.approved,
        }), 201
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@comment_bp.route("/posts/<int:post_id>/comments", methods=["GET"])
@jwt_required(optional=True)
def get_post_comments(post_id):
    page = request.args.get("page", default=1, type=int)
    page_size = request.args.get("page_size", default=10, type=int)

    try:
        comments = comment_service.get_comments_tree_by_post(
            post_id, page, page_size, viewer_username=get_jwt_identity()
        )
        return jsonify(comments), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404


@comment_bp.route("/posts/<int:post_id>/comments/<int:comment_id>", methods=["DELETE"])
@jwt_required()
def delete_post_comment(post_id, comment_id):
    try:
        comment_service.delete_post_comment(get_jwt_identity(), post_id, comment_id)
        return jsonify({"message": "Comment deleted"}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": str(e)}), 403


@comment_bp.route("/comments", methods=["GET"])
@jwt_required(optional=True)
def list_comments():
    try:
        data = comment_service.list_comments(
            page=request.args.get("page", default=1, type=int),
            limit=request.args.get("limit", default=20, type=int),
            post_id=request.args.get("post_id", type=int),
            status=request.args.get("status"),
            viewer_username=get_jwt_identity(),
        )
        return jsonify(data), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": str(e)}), 403
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@comment_bp.route("/comments", methods=["POST"])
@jwt_required()
@comment_creation_limit
def create_standalone_comment():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON body"}), 400

    payload = StandaloneCommentInputSchema().load(data)

    try:
        comment = comment_service.add_standalone_comment(
            get_jwt_identity(),
            post_id=payload["post_id"],
            body=payload["body"],
        )
        return jsonify({
            "success": True,
            "comment": serialize_comment(comment),
        }), 201
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@comment_bp.route("/comments/<int:comment_id>", methods=["PUT"])
@jwt_required()
def moderate_comment(comment_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON body"}), 400

    try:
        comment = comment_service.moderate_comment(
            get_jwt_identity(),
            comment_id,
            data.get("approved"),
        )
        return jsonify({"success": True, "comment": comment}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": str(e)}), 403
    except ValueError as e:
        return jsonify({"error": str(e)}), 400


@comment_bp.route("/comments/<int:comment_id>", methods=["DELETE"])
@jwt_required()
def delete_comment(comment_id):
    try:
        comment_service.remove_comment(get_jwt_identity(), comment_id)
        return jsonify({"success": True, "message": "Comment deleted"}), 200
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except PermissionDeniedError as e:
        return jsonify({"error": str(e)}), 403
