#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
Flask App Factory
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
import time
from dataclasses import dataclass
from flask import Flask, current_app, g, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tireshop import config
from tireshop.db import init_db
from tireshop.errors import TireShopError
from tireshop.health import DatabaseHealthMonitor
from tireshop.logging_config import setup_logging
from tireshop.recommendations import RecommendationEngine, build_client
from tireshop.repository import TireRepository, UserRepository

logger = logging.getLogger(__name__)


# ========================================================
# CLASSES
# ========================================================
@dataclass
class AppContext:
    """Everything the routes need, built once per app."""
    engine: object
    session_factory: object
    tires: TireRepository
    users: UserRepository
    recommender: RecommendationEngine
    health_monitor: DatabaseHealthMonitor

    def close(self):
        self.health_monitor.stop_monitoring()
        self.engine.dispose()


# ========================================================
# FUNCTIONS
# ========================================================
def get_context() -> AppContext:
    return current_app.extensions["tireshop"]


def build_context(settings: dict, openai_client=None) -> AppContext:
    engine, session_factory = init_db(settings["DATABASE_URL"])
    if openai_client is None:
        openai_client = build_client(settings["OPENAI_API_KEY"],
                                     settings["OPENAI_TIMEOUT_SECONDS"])
    return AppContext(
        engine=engine,
        session_factory=session_factory,
        tires=TireRepository(session_factory),
        users=UserRepository(session_factory),
        recommender=RecommendationEngine(openai_client,
                                         settings["OPENAI_MODEL"]),
        health_monitor=DatabaseHealthMonitor(
            engine, settings["HEALTH_CHECK_INTERVAL_SECONDS"]),
    )


def register_error_handlers(app):
    @app.errorhandler(TireShopError)
    def handle_domain_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"message": e.description}), e.code

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(e):
        logger.exception("Database error on %s %s", request.method,
                         request.path)
        return jsonify({"message": "Internal database error."}), 500


def register_request_logging(app):
    @app.before_request
    def log_request():
        g.request_started = time.perf_counter()
        logger.info("REQUEST %s %s", request.method, request.path)

    @app.after_request
    def log_response(response):
        started = g.get("request_started")
        duration_ms = (time.perf_counter() - started) * 1000 if started \
            else 0.0
        logger.info("RESPONSE %s %s status=%s duration_ms=%.2f",
                    request.method, request.path, response.status_code,
                    duration_ms)
        return response


def create_app(test_config=None, openai_client=None):
    """
    Build the app.

    test_config overrides any key of config.defaults(); openai_client
    replaces the client built from OPENAI_API_KEY (tests pass a mock).
    """
    settings = config.defaults()
    settings.update(test_config or {})
    setup_logging(settings["LOG_LEVEL"])

    app = Flask(__name__)
    app.config.update(settings)
    app.secret_key = settings["SECRET_KEY"]
    app.json.sort_keys = False

    app.extensions["tireshop"] = build_context(settings, openai_client)

    register_error_handlers(app)
    register_request_logging(app)

    # Register routes
    from tireshop.routes import register_routes
    register_routes(app)

    logger.info("%s v%s ready", config.APP_NAME, config.VERSION)
    return app
