import logging

import click
from flask import Flask, jsonify
from flask_limiter.errors import RateLimitExceeded
from marshmallow import ValidationError
from sqlalchemy import event
from sqlalchemy.engine import Engine

from app.config import Config
from app.db import db
from app.extensions.extensions import cors, jwt, limiter, ma


logger = logging.getLogger(__name__)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    if dbapi_connection.__class__.__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        root.addHandler(handler)
    root.setLevel(level)

    if not app.debug:
        logging.getLogger("werkzeug").setLevel(logging.WARNING)


def register_jwt_handlers():
    @jwt.unauthorized_loader
    def handle_missing_token(reason):
        return jsonify({"error": "Authorization required", "message": reason}), 401

    @jwt.invalid_token_loader
    def handle_invalid_token(reason):
        return jsonify({"error": "Invalid token", "message": reason}), 401

    @jwt.expired_token_loader
    def handle_expired_token(jwt_header, jwt_payload):
        return jsonify({"error": "Token expired"}), 401


def register_error_handlers(app):
    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return jsonify({"error": "Validation failed", "details": error.messages}), 400

    @app.errorhandler(RateLimitExceeded)
    def handle_rate_limit(error):
        return jsonify({
            "error": "Rate limit exceeded",
            "message": f"Too many requests, limit is {error.description}",
        }), 429

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def handle_internal_error(error):
        db.session.rollback()
        logger.exception("Unhandled error", exc_info=getattr(error, "original_exception", error))
        return jsonify({"error": "Internal server error"}), 500


def register_commands(app):
    @app.cli.command("publish-scheduled")
    def publish_scheduled_command():
        """Publish posts whose scheduled time has passed."""
        from app.services.schedule_service import publish_scheduled_posts

        count = publish_scheduled_posts()
        click.echo(f"Published {count} scheduled post(s)")

    @app.cli.command("create-admin")
    @click.argument("username")
    @click.password_option()
    @click.option("--email", default=None)
    def create_admin_command(username, password, email):
        """Create an administrator account."""
        from app.models.user_model import ROLE_ADMIN
        from app.services import auth_service

        try:
            auth_service.register(username, password, email=email, role=ROLE_ADMIN)
        except ValueError as e:
            raise click.ClickException(str(e))
        click.echo(f"Admin {username} created")


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    configure_logging(app)

    db.init_app(app)
    ma.init_app(app)
    jwt.init_app(app)
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ALLOWED_ORIGINS"]}},
        supports_credentials=True,
    )
    limiter.init_app(app)

    from app import models  # noqa: F401
    from app.routes.analytics_routes import analytics_bp
    from app.routes.auth_routes import auth_bp
    from app.routes.comment_routes import comment_bp
    from app.routes.cron_routes import cron_bp
    from app.routes.export_routes import export_bp
    from app.routes.feed_routes import feed_bp
    from app.routes.health_routes import health_bp
    from app.routes.media_routes import media_bp
    from app.routes.post_routes import post_bp
    from app.routes.preview_routes import preview_bp
    from app.routes.profile_routes import profile_bp
    from app.routes.settings_routes import settings_bp
    from app.routes.taxonomy_routes import taxonomy_bp
    from app.routes.upload_routes import upload_bp
    from app.routes.waitlist_routes import waitlist_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    for blueprint in (
        post_bp,
        comment_bp,
        taxonomy_bp,
        profile_bp,
        settings_bp,
        preview_bp,
        analytics_bp,
        export_bp,
        feed_bp,
        waitlist_bp,
        upload_bp,
        cron_bp,
        health_bp,
    ):
        app.register_blueprint(blueprint, url_prefix="/api")
    app.register_blueprint(media_bp)

    register_jwt_handlers()
    register_error_handlers(app)
    register_commands(app)

    with app.app_context():
        db.create_all()

    return app
