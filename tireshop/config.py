#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
App Configurations
"""
# ========================================================
# IMPORTS
# ========================================================
import os
from pathlib import Path

# ========================================================
# GLOABALS
# ========================================================
VERSION = "1.0.0"
APP_NAME = "Tire Shop"

BASE_DIR = Path(__file__).resolve().parents[1]
DB_PATH = str(BASE_DIR / "db/tireshop.db")

# Set Production via ENV!
DATABASE_URL = os.environ.get("TIRESHOP_DATABASE_URL", f"sqlite:///{DB_PATH}")
SECRET_KEY = os.environ.get("TIRESHOP_SECRET_KEY", "change-me-please")
HOST = os.environ.get("TIRESHOP_HOST", "0.0.0.0")
PORT = int(os.environ.get("TIRESHOP_PORT", "5000"))
LOG_LEVEL = os.environ.get("TIRESHOP_LOG_LEVEL", "INFO")

# Recommendation service (optional, fallback ranking is used without a key)
OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o")
OPENAI_TIMEOUT_SECONDS = float(os.environ.get("OPENAI_TIMEOUT_SECONDS", "15"))

HEALTH_CHECK_INTERVAL_SECONDS = int(
    os.environ.get("TIRESHOP_HEALTH_INTERVAL", "30"))


def defaults() -> dict:
    """Snapshot of the settings create_app() starts from."""
    return {
        "DATABASE_URL": DATABASE_URL,
        "SECRET_KEY": SECRET_KEY,
        "LOG_LEVEL": LOG_LEVEL,
        "OPENAI_API_KEY": OPENAI_API_KEY,
        "OPENAI_MODEL": OPENAI_MODEL,
        "OPENAI_TIMEOUT_SECONDS": OPENAI_TIMEOUT_SECONDS,
        "HEALTH_CHECK_INTERVAL_SECONDS": HEALTH_CHECK_INTERVAL_SECONDS,
        # session cookie is not sent on cross-site POSTs (logout, deletes)
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_HTTPONLY": True,
    }
