import logging

from flask import Flask
from .errors import register_error_handlers
from .config import Config, DEFAULT_JWT_SECRET
from flasgger import Swagger
from .extensions import db, jwt, ma, mail
from .swagger_config import swagger_template
from .middleware.request_id import init_request_id
from .middleware.auth_gate import init_auth_gate
from .services import init_services


def create_app(config_class=Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    if app.config["JWT_SECRET_KEY"] == DEFAULT_JWT_SECRET:
        app.logger.warning("JWT_SECRET_KEY is not set; tokens are signed with the built-in development secret")

    # Extensions
    jwt.init_app(app)
    ma.init_app(app)
    mail.init_app(app)
    Swagger(app, template=swagger_template(app))

    if app.config["STORAGE_BACKEND"] == "sql":
        db.init_app(app)

    services = init_services(app)

    if app.config["STORAGE_BACKEND"] == "sql":
        with app.app_context():
            db.create_all()

    # Middleware + errors
    init_request_id(app)
    init_auth_gate(app)
    register_error_handlers(app)

    # Blueprint imports
    from .api.auth.routes import auth_bp
    from .api.nft.routes import nft_bp
    from .api.voting.routes import voting_bp
    from .api.admin.routes import admin_bp

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(nft_bp, url_prefix="/api/nft")
    app.register_blueprint(voting_bp, url_prefix="/api/voting")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")

    # Health check
    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    app.logger.info(
        "NFT voting app ready storage=%s options=%d",
        app.config["STORAGE_BACKEND"], len(services.ledger.options()),
    )
    return app
