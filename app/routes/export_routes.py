import json

from flask import Blueprint, Response, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from app.extensions.extensions import limiter
from app.services import export_service
from app.services.errors import NotFoundError


export_bp = Blueprint("export", __name__)

export_limit = limiter.shared_limit("3 per day", scope="export")


@export_bp.route("/export/<any(posts, comments, profile):kind>", methods=["GET"])
@jwt_required()
@export_limit
def export(kind):
    try:
        payload = export_service.build_export(get_jwt_identity(), kind)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404

    filename = export_service.export_filename(kind)
    return Response(
        json.dumps(payload, indent=2, default=str),
        status=200,
        mimetype="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
