class NotFoundError(LookupError):
    pass


class PermissionDeniedError(Exception):
    pass


class ConflictError(ValueError):
    pass


class MediaStorageError(Exception):
    pass
