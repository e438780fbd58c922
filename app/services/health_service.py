import logging
from datetime import datetime

from redis.exceptions import RedisError
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from app.db import db
from app.extensions.redis_client import get_redis_client


logger = logging.getLogger(__name__)

STATUS_HEALTHY = "healthy"
STATUS_DEGRADED = "degraded"
STATUS_UNHEALTHY = "unhealthy"


def _check_database():
    try:
        db.session.execute(text("SELECT 1"))
        tables = sorted(inspect(db.engine).get_table_names())
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Database health check failed: %s", e)
        return {"status": "error", "error": str(e)}

    missing = sorted(set(db.metadata.tables) - set(tables))
    return {
        "status": "ok" if not missing else "incomplete",
        "tables": tables,
        "missing_tables": missing,
    }


def _check_cache():
    try:
        get_redis_client().ping()
    except RedisError as e:
        logger.warning("Redis health check failed: %s", e)
        return {"status": "error", "error": str(e)}
    return {"status": "ok"}


def check_health():
    """Return ``(payload, healthy)``; only a database failure marks the service unhealthy."""
    database = _check_database()
    cache = _check_cache()

    if database["status"] == "error":
        status = STATUS_UNHEALTHY
    elif database["status"] != "ok" or cache["status"] != "ok":
        status = STATUS_DEGRADED
    else:
        status = STATUS_HEALTHY

    return {
        "status": status,
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "checks": {
            "database": database,
            "cache": cache,
        },
    }, status != STATUS_UNHEALTHY
