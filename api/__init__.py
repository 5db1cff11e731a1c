import logging

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config, validate_config
from .errors import register_error_handlers
from .commands import register_commands
from models import storage, blobs

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "GBA File Server API",
        "version": "1.0.0",
        "description": "Authenticated storage for ROM images and save files.",
    },
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the access token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}

CORS_METHODS = ["GET", "POST", "OPTIONS"]
CORS_HEADERS = ["Accept", "Content-Type", "Content-Length", "Accept-Encoding", "Authorization"]


def configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger().setLevel(level)


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    `overrides` is applied on top of the selected config class (used by tests).
    Raises ConfigurationError when JWT_SECRET is missing.
    """
    app = Flask(__name__)

    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)
    validate_config(app.config)

    configure_logging(app)

    origins = app.config.get("CORS_ORIGINS", "*")
    if origins != "*":
        origins = [o.strip() for o in origins.split(",") if o.strip()]
    CORS(
        app,
        resources={r"/api/*": {"origins": origins}},
        methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        expose_headers=["Set-Cookie"],
        supports_credentials=True,
    )

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)
    register_commands(app)

    # Rebind the storage singletons to this app's settings
    storage.reload(app.config["DATABASE_URL"])
    blobs.configure(app.config["BLOB_STORAGE_ROOT"])

    from .health import bp as health_bp
    from .auth import bp as account_bp
    from .tokens import bp as tokens_bp
    from .files import bp as files_bp

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(account_bp, url_prefix="/api/account")
    app.register_blueprint(tokens_bp, url_prefix="/api/tokens")
    app.register_blueprint(files_bp, url_prefix="/api")

    @app.teardown_appcontext
    def remove_session(exception=None):
        # scoped_session.remove(), so connections go back to the pool
        storage.close()

    @app.route("/")
    def root():
        return "Hello World! This is a GBA file/auth server.", 200, {"Content-Type": "text/plain"}

    return app
