import os
import subprocess

from flask import Flask, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from backoffice.config import Config, is_production
from backoffice.errors import BackofficeError
from backoffice.extensions import db, migrate, cors
from backoffice.segments.segment_courier import courier_bp
from backoffice.segments.segment_fraud_check import fraud_check_bp
from backoffice.segments.segment_orders import orders_bp


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    env = (app.config.get("ENV_NAME") or "dev").strip().lower()

    # Production safety checks
    if is_production(env):
        secret = (os.getenv("SECRET_KEY") or "").strip()
        if not secret or len(secret) < 16:
            raise RuntimeError("SECRET_KEY must be set and at least 16 chars in production")
        if not (os.getenv("DATABASE_URL") or "").strip() and not (os.getenv("SQLALCHEMY_DATABASE_URI") or "").strip():
            raise RuntimeError("DATABASE_URL (or SQLALCHEMY_DATABASE_URI) must be set in production")

    # Library modules log through children of the app logger ("backoffice.*")
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Ensure instance dir exists for SQLite paths
    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite:///") and ":memory:" not in app.config["SQLALCHEMY_DATABASE_URI"]:
        os.makedirs(app.config["INSTANCE_DIR"], exist_ok=True)

    # CORS configuration
    cors_origins = (app.config.get("CORS_ORIGINS") or "").strip()
    origins = [o.strip() for o in cors_origins.split(",") if o.strip()]
    if not origins and not is_production(env):
        origins = ["*"]
    cors.init_app(app, resources={r"/api/*": {"origins": origins}})

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Register API routes
    app.register_blueprint(fraud_check_bp)
    app.register_blueprint(courier_bp)
    app.register_blueprint(orders_bp)

    if not is_production(env):
        from backoffice.devtools import dev

        app.register_blueprint(dev)

    @app.errorhandler(BackofficeError)
    def _backoffice_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(Exception)
    def _unexpected_error(e):
        if isinstance(e, HTTPException):
            return e
        app.logger.exception("Unhandled error")
        return jsonify({"success": False, "error": "Internal server error"}), 500

    # Health check
    @app.get("/api/health")
    def health():
        db_state = "ok"
        try:
            db.session.execute(text("SELECT 1"))
        except SQLAlchemyError:
            db_state = "fail"
        return jsonify({
            "ok": True,
            "service": "backoffice",
            "env": env,
            "db": db_state,
        })

    @app.get("/api/version")
    def version():
        def _get_alembic_head() -> str:
            try:
                from alembic.script import ScriptDirectory
                migrations_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "migrations"))
                heads = ScriptDirectory(migrations_dir).get_heads()
                return heads[0] if heads else "unknown"
            except Exception:
                return "unknown"

        def _get_git_sha() -> str:
            try:
                repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
                out = subprocess.check_output(["git", "rev-parse", "HEAD"], cwd=repo_root, stderr=subprocess.DEVNULL)
                return out.decode().strip()
            except (OSError, subprocess.CalledProcessError):
                return "unknown"

        return jsonify({
            "ok": True,
            "alembic_head": _get_alembic_head(),
            "git_sha": _get_git_sha(),
        })

    return app
