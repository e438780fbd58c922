from flask import Blueprint, Response, current_app

from app.services import feed_service


feed_bp = Blueprint("feed", __name__)


@feed_bp.route("/feed.xml", methods=["GET"])
def rss_feed():
    response = Response(feed_service.build_rss_feed(), mimetype="application/rss+xml")
    response.cache_control.public = True
    response.cache_control.max_age = current_app.config["FEED_CACHE_MAX_AGE_SECONDS"]
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response
