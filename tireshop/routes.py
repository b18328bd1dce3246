#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
All routes attached to app
"""
# ========================================================
# IMPORTS
# ========================================================
from flask import request, abort, jsonify, Response

# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tireshop.app import get_context
from tireshop.auth import (
    admin_required, current_user, login_required, login_user, logout_user
)
from tireshop.config import APP_NAME, VERSION
from tireshop.filters import TireFilters
from tireshop.recommendations import UserPreferences
from tireshop.validation import validate_credentials


# ========================================================
# FUNCTIONS
# ========================================================
def json_body():
    # None for missing/broken JSON, validation reports it
    return request.get_json(silent=True)


def to_json(items):
    return jsonify([item.to_dict() for item in items])


# --------------------------------------------------------
# Routes
# --------------------------------------------------------
def register_routes(app):
    @app.route("/health")
    def health():
        return jsonify({"status": "ok", "service": APP_NAME,
                        "version": VERSION})

    # ----------------------------------------------------
    # Tires
    # ----------------------------------------------------
    @app.route("/api/tires")
    def list_tires():
        filters = TireFilters.from_query(request.args)
        return to_json(get_context().tires.list_tires(filters))

    @app.route("/api/tires/<int:tid>")
    def get_tire(tid):
        tire = get_context().tires.get_tire(tid)
        if not tire:
            abort(404, description="Tire not found")
        return jsonify(tire.to_dict())

    @app.route("/api/tires", methods=["POST"])
    @admin_required
    def create_tire():
        tire = get_context().tires.create_tire(json_body(),
                                               current_user().id)
        return jsonify(tire.to_dict()), 201

    @app.route("/api/tires/<int:tid>", methods=["PATCH"])
    @admin_required
    def update_tire(tid):
        tire = get_context().tires.update_tire(tid, json_body())
        if not tire:
            abort(404, description="Tire not found")
        return jsonify(tire.to_dict())

    @app.route("/api/tires/<int:tid>", methods=["DELETE"])
    @admin_required
    def delete_tire(tid):
        if not get_context().tires.delete_tire(tid):
            abort(404, description="Tire not found")
        return Response(status=204)

    # ----------------------------------------------------
    # Brands
    # ----------------------------------------------------
    @app.route("/api/brands")
    def list_brands():
        return to_json(get_context().tires.list_brands())

    @app.route("/api/brands", methods=["POST"])
    @admin_required
    def create_brand():
        brand = get_context().tires.create_brand(json_body())
        return jsonify(brand.to_dict()), 201

    @app.route("/api/brands/<int:bid>", methods=["PATCH"])
    @admin_required
    def update_brand(bid):
        brand = get_context().tires.update_brand(bid, json_body())
        if not brand:
            abort(404, description="Brand not found")
        return jsonify(brand.to_dict())

    @app.route("/api/brands/<int:bid>", methods=["DELETE"])
    @admin_required
    def delete_brand(bid):
        if not get_context().tires.delete_brand(bid):
            abort(404, description="Brand not found")
        return Response(status=204)

    @app.route("/api/brands/<int:bid>/models")
    def list_brand_models(bid):
        ctx = get_context()
        if not ctx.tires.get_brand(bid):
            abort(404, description="Brand not found")
        return to_json(ctx.tires.list_models(brand_id=bid))

    # ----------------------------------------------------
    # Tire models
    # ----------------------------------------------------
    @app.route("/api/models")
    def list_models():
        return to_json(get_context().tires.list_models())

    @app.route("/api/models", methods=["POST"])
    @admin_required
    def create_model():
        model = get_context().tires.create_model(json_body())
        return jsonify(model.to_dict()), 201

    @app.route("/api/models/<int:mid>", methods=["PATCH"])
    @admin_required
    def update_model(mid):
        model = get_context().tires.update_model(mid, json_body())
        if not model:
            abort(404, description="Model not found")
        return jsonify(model.to_dict())

    @app.route("/api/models/<int:mid>", methods=["DELETE"])
    @admin_required
    def delete_model(mid):
        if not get_context().tires.delete_model(mid):
            abort(404, description="Model not found")
        return Response(status=204)

    # ----------------------------------------------------
    # Recommendations
    # ----------------------------------------------------
    @app.route("/api/recommendations", methods=["POST"])
    def recommendations():
        ctx = get_context()
        prefs = UserPreferences.from_json(json_body())
        candidates = ctx.tires.list_tires()
        return to_json(ctx.recommender.recommend(prefs, candidates))

    # ----------------------------------------------------
    # Health
    # ----------------------------------------------------
    @app.route("/api/health/database")
    @admin_required
    def database_health():
        health = get_context().health_monitor.check_health()
        return jsonify(health.to_dict()), 200 if health.is_connected else 503

    # ----------------------------------------------------
    # Session auth
    # ----------------------------------------------------
    @app.route("/api/register", methods=["POST"])
    def register():
        username, password = validate_credentials(json_body())
        user = get_context().users.create_user(username, password)
        login_user(user)
        return jsonify(user.to_dict()), 201

    @app.route("/api/login", methods=["POST"])
    def login():
        username, password = validate_credentials(json_body(),
                                                  check_length=False)
        user = get_context().users.authenticate(username, password)
        if not user:
            abort(401, description="Invalid username or password.")
        login_user(user)
        return jsonify(user.to_dict())

    @app.route("/api/logout", methods=["POST"])
    def logout():
        logout_user()
        return Response(status=204)

    @app.route("/api/user")
    @login_required
    def me():
        return jsonify(current_user().to_dict())
