import logging
import os
import uuid

from flask import current_app, has_request_context, request
from minio.error import S3Error

from app.extensions.minio_client import ensure_bucket, get_minio_client
from app.services.errors import MediaStorageError, NotFoundError


logger = logging.getLogger(__name__)

ALLOWED_IMAGE_MIME_TYPES = {
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/gif",
}

MEGABYTE = 1024 * 1024

# Maximum size in bytes per upload kind.
UPLOAD_KINDS = {
    "image": 4 * MEGABYTE,
    "cover": 8 * MEGABYTE,
    "avatar": 2 * MEGABYTE,
}


def build_media_url(object_name: str) -> str:
    base_url = current_app.config.get("APP_PUBLIC_BASE_URL", "").rstrip("/")
    if not base_url and has_request_context():
        base_url = request.url_root.rstrip("/")

    if object_name.startswith("static/"):
        if base_url:
            return f"{base_url}/{object_name}"
        return f"/{object_name}"

    if base_url:
        return f"{base_url}/media/{object_name}"
    return f"/media/{object_name}"


def _extension_for_mimetype(mimetype: str) -> str:
    mapping = {
        "image/jpeg": "jpeg",
        "image/png": "png",
        "image/webp": "webp",
        "image/gif": "gif",
    }
    return mapping.get(mimetype, mimetype.split("/")[-1])


def _get_stream_and_length(file_storage):
    stream = getattr(file_storage, "stream", file_storage)
    try:
        stream.seek(0, 2)
        length = stream.tell()
        stream.seek(0)
        return stream, length
    except (AttributeError, OSError):
        return stream, -1


def _store_locally(file_storage, object_name: str) -> str:
    relative_path = os.path.join("uploads", *object_name.split("/")[1:])
    absolute_path = os.path.join(current_app.static_folder, relative_path)
    os.makedirs(os.path.dirname(absolute_path), exist_ok=True)

    stream = getattr(file_storage, "stream", file_storage)
    stream.seek(0)
    file_storage.save(absolute_path)
    return "static/" + relative_path.replace(os.sep, "/")


def validate_upload(file_storage, kind: str):
    if kind not in UPLOAD_KINDS:
        raise ValueError(f"Unknown upload kind: {kind}")

    if file_storage is None or not getattr(file_storage, "filename", ""):
        raise ValueError("File is required")

    mimetype = getattr(file_storage, "mimetype", None) or ""
    if mimetype not in ALLOWED_IMAGE_MIME_TYPES:
        raise ValueError(f"Unsupported media type: {mimetype}")

    _, length = _get_stream_and_length(file_storage)
    max_size = UPLOAD_KINDS[kind]
    if length > max_size:
        raise ValueError(f"File exceeds the {max_size // MEGABYTE}MB limit")

    return mimetype, length


def store_upload(file_storage, kind: str, owner_id: int) -> str:
    """Store an uploaded image and return its object name.

    Objects go to MinIO under ``uploads/<kind>/<owner_id>/``. When MinIO is
    unreachable and ``MEDIA_LOCAL_FALLBACK_ENABLED`` is set, the file is
    written below the static folder instead and the returned name starts
    with ``static/``.
    """
    mimetype, length = validate_upload(file_storage, kind)
    extension = _extension_for_mimetype(mimetype)
    object_name = f"uploads/{kind}/{owner_id}/{uuid.uuid4()}.{extension}"

    bucket = current_app.config["MINIO_BUCKET"]
    local_fallback_enabled = bool(
        current_app.config.get("MEDIA_LOCAL_FALLBACK_ENABLED", True)
    )

    try:
        minio = get_minio_client()
        ensure_bucket(minio, bucket)
        stream, length = _get_stream_and_length(file_storage)
        upload_kwargs = {
            "bucket_name": bucket,
            "object_name": object_name,
            "data": stream,
            "length": length,
            "content_type": mimetype,
        }
        if length == -1:
            upload_kwargs["part_size"] = 10 * MEGABYTE

        minio.put_object(**upload_kwargs)
        return object_name
    except Exception as e:
        if not local_fallback_enabled:
            raise MediaStorageError("Media storage is unavailable") from e
        logger.warning("MinIO upload failed, storing %s locally: %s", object_name, e)

    try:
        return _store_locally(file_storage, object_name)
    except OSError as e:
        raise MediaStorageError("Media storage is unavailable") from e


def _raise_for_s3_error(error: S3Error, object_name: str):
    if error.code in {"NoSuchKey", "NoSuchBucket", "NoSuchObject"}:
        raise NotFoundError("Media not found") from error
    logger.error("MinIO error for %s: %s", object_name, error.code)
    raise MediaStorageError("Media unavailable") from error


def stat_media(object_name: str):
    try:
        return get_minio_client().stat_object(
            bucket_name=current_app.config["MINIO_BUCKET"],
            object_name=object_name,
        )
    except S3Error as e:
        _raise_for_s3_error(e, object_name)
    except Exception as e:
        raise MediaStorageError("Media unavailable") from e


def open_media(object_name: str):
    """Return the MinIO response for ``object_name``; the caller closes it."""
    try:
        return get_minio_client().get_object(
            bucket_name=current_app.config["MINIO_BUCKET"],
            object_name=object_name,
        )
    except S3Error as e:
        _raise_for_s3_error(e, object_name)
    except Exception as e:
        raise MediaStorageError("Media unavailable") from e
