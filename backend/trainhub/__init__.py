# backend/trainhub/__init__.py
import logging

from flask import Flask, jsonify, request

from .config import Config
from .extensions import db, migrate



def create_app(config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.users import users_bp
    from .routes.training import training_bp
    from .routes.uploads import uploads_bp
    from .routes.barcode import barcode_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(training_bp)
    app.register_blueprint(uploads_bp)
    app.register_blueprint(barcode_bp)

    @app.errorhandler(413)
    def request_too_large(_error):
        return jsonify({"ok": False, "error": "file too large or invalid"}), 413

    @app.errorhandler(405)
    def method_not_allowed(_error):
        return jsonify({"ok": False, "error": "method not allowed"}), 405

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = {
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        }
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
        return response

    app.logger.setLevel(logging.INFO)
    app.logger.info("DB URI: %s", app.config["SQLALCHEMY_DATABASE_URI"])

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
