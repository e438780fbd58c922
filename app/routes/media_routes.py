from datetime import timezone

from flask import Blueprint, Response, current_app, jsonify, request, stream_with_context
from werkzeug.http import is_resource_modified

from app.services import media_service
from app.services.errors import MediaStorageError, NotFoundError


media_bp = Blueprint("media", __name__)


def _apply_cache_headers(response: Response):
    response.cache_control.public = True
    response.cache_control.max_age = max(
        int(current_app.config.get("MEDIA_CACHE_MAX_AGE_SECONDS", 7 * 24 * 60 * 60)),
        0,
    )
    if current_app.config.get("MEDIA_CACHE_IMMUTABLE", True):
        response.cache_control.immutable = True
    response.headers["Accept-Ranges"] = "bytes"


def _utc(value):
    if value is not None and value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


@media_bp.route("/media/<path:object_name>", methods=["GET", "HEAD"])
def get_media(object_name: str):
    try:
        stat = media_service.stat_media(object_name)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except MediaStorageError as e:
        return jsonify({"error": str(e)}), 503

    etag = (getattr(stat, "etag", None) or "").strip('"') or None
    last_modified = _utc(getattr(stat, "last_modified", None))

    response = Response(
        status=200,
        content_type=getattr(stat, "content_type", None) or "application/octet-stream",
    )
    _apply_cache_headers(response)
    if etag:
        response.set_etag(etag)
    if last_modified:
        response.last_modified = last_modified

    if not is_resource_modified(request.environ, etag=etag, last_modified=last_modified):
        response.status_code = 304
        return response

    size = getattr(stat, "size", None)
    if size is not None:
        response.content_length = size

    if request.method == "HEAD":
        return response

    try:
        minio_response = media_service.open_media(object_name)
    except NotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except MediaStorageError as e:
        return jsonify({"error": str(e)}), 503

    chunk_size = max(
        int(current_app.config.get("MEDIA_STREAM_CHUNK_SIZE", 256 * 1024)),
        1024,
    )

    def _stream():
        try:
            yield from minio_response.stream(chunk_size)
        finally:
            minio_response.close()
            minio_response.release_conn()

    response.response = stream_with_context(_stream())
    response.direct_passthrough = True
    return response
