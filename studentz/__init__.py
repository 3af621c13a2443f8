import os

from flask import Flask

from .config import Config
from .extensions import db


def create_app(config=None):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # instance folder
    os.makedirs(app.instance_path, exist_ok=True)

    # ===== default store: instance/studentz.db =====
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        db_path = os.path.join(app.instance_path, "studentz.db")
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{db_path}"

    # bounded wait on a locked SQLite file; expiry surfaces as a store error
    if app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite"):
        options = app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {})
        options.setdefault("connect_args", {}).setdefault("timeout", app.config["STORE_TIMEOUT"])

    # init extensions
    db.init_app(app)

    # import models so SQLAlchemy registers tables
    from .models import Report, Member  # noqa

    # register blueprints
    from .routes import register_blueprints
    register_blueprints(app)

    # register error handlers
    from .errors import register_error_handlers
    register_error_handlers(app)

    # the forms are served from another origin
    @app.after_request
    def add_header(response):
        response.headers["Access-Control-Allow-Origin"] = app.config["CORS_ORIGIN"]
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        response.headers["Cache-Control"] = "no-store"
        return response

    with app.app_context():
        db.create_all()

    return app
