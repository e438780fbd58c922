import logging

from app.repositories import user_repository
from app.services import media_service
from app.services.errors import NotFoundError
from app.services.profile_service import set_avatar


logger = logging.getLogger(__name__)


def upload_file(username: str, kind: str, file_storage):
    user = user_repository.get_by_username(username)
    if not user:
        raise NotFoundError("User not found")

    object_name = media_service.store_upload(file_storage, kind=kind, owner_id=user.id)
    if kind == "avatar":
        set_avatar(user, object_name)

    logger.info("Stored %s upload %s for %s", kind, object_name, username)
    return {
        "url": media_service.build_media_url(object_name),
        "object_name": object_name,
        "kind": kind,
    }
