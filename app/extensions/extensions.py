from flask_cors import CORS
from flask_jwt_extended import JWTManager, get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_marshmallow import Marshmallow
from jwt.exceptions import PyJWTError


def rate_limit_key():
    """Bucket authenticated callers by username and everyone else by IP."""
    try:
        verify_jwt_in_request(optional=True)
        identity = get_jwt_identity()
    except (JWTExtendedException, PyJWTError):
        identity = None

    if identity:
        return f"user:{identity}"
    return f"ip:{get_remote_address()}"


ma = Marshmallow()
jwt = JWTManager()
cors = CORS()
limiter = Limiter(key_func=rate_limit_key)
