import logging

from flask import Flask
from .config import Config
from .extensions import db, migrate, jwt


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    from . import jwt_callbacks

    @jwt.token_in_blocklist_loader
    def token_in_blocklist_loader(jwt_header, jwt_payload):
        return jwt_callbacks.is_token_revoked(jwt_header, jwt_payload)

    jwt.unauthorized_loader(jwt_callbacks.missing_token)
    jwt.invalid_token_loader(jwt_callbacks.invalid_token)
    jwt.expired_token_loader(jwt_callbacks.expired_token)
    jwt.revoked_token_loader(jwt_callbacks.revoked_token)

    from . import models  # noqa: F401

    from .errors import register_error_handlers
    register_error_handlers(app)

    from .utils.auth import authorize_request
    app.before_request(authorize_request)

    from .routes import register_blueprints
    register_blueprints(app)

    @app.get("/routes")
    def show_routes():
        return {"routes": sorted([str(r) for r in app.url_map.iter_rules()])}

    app.logger.info("summerreg app created (db=%s)", app.config.get("SQLALCHEMY_DATABASE_URI"))
    return app
