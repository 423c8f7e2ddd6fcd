"""Application factory."""

import json
import logging
import uuid

from flask import Flask, jsonify, g, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from routes.auth import auth_bp
from routes.users import users_bp
from services.auth_service import AuthService, AuthSettings
from services.errors import AuthError, ErrorKind
from storage import AbstractAccountStore, RestAccountStore, SqlAccountStore

migrate = Migrate()
jwt = JWTManager()

# Validation errors are always 400; endpoints listed below answer every other
# failure with a fixed status. BACKEND has no entry of its own.
ERROR_KIND_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHORIZATION: 401,
    ErrorKind.CONFLICT: 400,
}
ENDPOINT_FAILURE_STATUS = {
    "auth.metamask_login": 401,
    "auth.link_wallet": 400,
    "auth.link_email": 400,
    "auth.update_profile": 400,
}
# Blueprints whose unexpected errors are answered with the endpoint status, not 500.
FAILURE_MAPPED_BLUEPRINTS = {"auth", "users"}
DEFAULT_FAILURE_STATUS = 400


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    logging.getLogger("services").setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    settings = AuthSettings.from_config(app.config)
    app.extensions["auth_service"] = AuthService.from_settings(
        settings, _build_account_store(app)
    )

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(users_bp, url_prefix="/users")

    # Health
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    # Errors
    _register_error_handlers(app)

    return app


def _build_account_store(app: Flask) -> AbstractAccountStore:
    backend = (app.config.get("ACCOUNT_STORE") or "sql").strip().lower()
    if backend == "sql":
        return SqlAccountStore()
    if backend == "rest":
        url = app.config.get("SUPABASE_URL")
        key = app.config.get("SUPABASE_KEY")
        if not url or not key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY are required for the rest store.")
        return RestAccountStore(
            url,
            key,
            table=app.config.get("SUPABASE_TABLE", "users"),
            timeout=app.config.get("STORE_TIMEOUT", 10.0),
        )
    raise RuntimeError(f"Unknown ACCOUNT_STORE: {backend!r}")


def _error_response(message: str, status: int):
    request_id = g.get("request_id") or str(uuid.uuid4())
    response = jsonify({"error": message, "request_id": request_id})
    response.status_code = status
    response.headers.setdefault("X-Request-ID", request_id)
    return response


@jwt.unauthorized_loader
def _missing_token(reason: str):
    return _error_response("Access denied", 401)


@jwt.invalid_token_loader
def _invalid_token(reason: str):
    return _error_response("Invalid token", 403)


@jwt.expired_token_loader
def _expired_token(jwt_header: dict, jwt_payload: dict):
    return _error_response("Invalid token", 403)


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():  # pragma: no cover
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):  # pragma: no cover
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(AuthError)
    def _handle_auth_error(error: AuthError):
        if error.kind is ErrorKind.VALIDATION:
            status = ERROR_KIND_STATUS[ErrorKind.VALIDATION]
        elif request.endpoint in ENDPOINT_FAILURE_STATUS:
            status = ENDPOINT_FAILURE_STATUS[request.endpoint]
        else:
            status = ERROR_KIND_STATUS.get(error.kind, DEFAULT_FAILURE_STATUS)
        if error.kind is ErrorKind.BACKEND:
            app.logger.warning("Account store error on %s: %s", request.path, error.message)
        return _error_response(error.message, status)

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        request_id = g.get("request_id") or str(uuid.uuid4())
        response = error.get_response()
        payload = {
            "error": getattr(error, "name", "Error"),
            "detail": error.description,
            "request_id": request_id,
        }
        response.data = json.dumps(payload)
        response.content_type = "application/json"
        response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        request_id = g.get("request_id") or str(uuid.uuid4())
        app.logger.exception("Unhandled application error", exc_info=error)
        if request.blueprint in FAILURE_MAPPED_BLUEPRINTS:
            status = ENDPOINT_FAILURE_STATUS.get(request.endpoint, DEFAULT_FAILURE_STATUS)
            return _error_response(str(error) or type(error).__name__, status)
        payload = {
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred.",
            "request_id": request_id,
        }
        response = jsonify(payload)
        response.status_code = 500
        response.headers.setdefault("X-Request-ID", request_id)
        return response


if __name__ == "__main__":
    logging.basicConfig(
        level=Config.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    application = create_app()
    application.run(host="0.0.0.0", port=application.config.get("PORT", 3000))
