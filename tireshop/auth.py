#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
Auth: session login and admin gate
"""
# ========================================================
# IMPORTS
# ========================================================
from functools import wraps
from flask import session, abort, g, current_app


# ========================================================
# FUNCTIONS
# ========================================================
def login_user(user):
    session.clear()
    session["user_id"] = user.id
    session.permanent = True


def logout_user():
    session.pop("user_id", None)
    g.pop("current_user", None)


def current_user():
    """Logged-in user for this request, or None (cached on flask.g)."""
    if "current_user" in g:
        return g.current_user
    user = None
    user_id = session.get("user_id")
    if user_id is not None:
        users = current_app.extensions["tireshop"].users
        user = users.get_user(user_id)
        if user is None:
            # account was removed while the cookie was still around
            session.pop("user_id", None)
    g.current_user = user
    return user


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if current_user() is None:
            abort(401, description="Not logged in.")
        return view(*args, **kwargs)
    return wrapped


def admin_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        user = current_user()
        if user is None:
            abort(401, description="Not logged in.")
        if not user.is_admin:
            abort(403, description="Admin access required.")
        return view(*args, **kwargs)
    return wrapped
