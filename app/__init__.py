from functools import partial

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .config import Config
from .controllers.auth import bp as auth_bp
from .controllers.bookings import bp as bookings_bp
from .controllers.clients import bp as clients_bp
from .controllers.vehicles import bp as vehicles_bp
from .exceptions import CarHireError
from .models.store import Store
from .services.common import _today
from .services.init import build_services
from .utils.logger import configure_logging, get_logger

log = get_logger(__name__)


def register_error_handlers(app):
    @app.errorhandler(CarHireError)
    def handle_carhire_error(err):
        if err.status_code >= 500:
            log.error("%s: %s", err.kind, err.message)
        else:
            log.info("Rejected %s: %s", err.kind, err.message)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify(success=False, error=err.name, message=err.description), err.code


def create_app(config=None, store=None, policy=None, clock=None):
    app = Flask(__name__)
    app.config.from_object(config or Config)
    app.config.from_prefixed_env("CARHIRE")
    configure_logging(app.config.get("LOG_LEVEL"))

    store = store or Store.instance(app.config["DATA_PATH"])
    clock = clock or partial(_today, app.config["BUSINESS_TIMEZONE"])
    services = build_services(store, policy=policy, clock=clock)
    app.extensions["carhire"] = services

    if app.config.get("SEED_DEMO_USERS") and store.count("users") == 0:
        services.users.ensure_demo_users()

    app.register_blueprint(auth_bp)
    app.register_blueprint(clients_bp)
    app.register_blueprint(vehicles_bp)
    app.register_blueprint(bookings_bp)
    register_error_handlers(app)

    @app.get("/")
    def index():
        return jsonify(success=True, message="Car Hire Management API running")

    return app
