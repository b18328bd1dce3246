#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
DB
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tireshop.models import Base  # ensure models import before create_all

logger = logging.getLogger(__name__)


# ========================================================
# EVENT LISTENER
# ========================================================
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA foreign_keys=ON;")
    finally:
        cursor.close()


# ========================================================
# FUNCTIONS
# ========================================================
def create_db_engine(database_url: str):
    """
    Build the engine for the given URL.

    SQLite files get their folder created; in-memory SQLite shares a single
    connection so every session sees the same database.
    """
    url = make_url(database_url)
    kwargs = {"echo": False, "future": True}

    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        else:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(database_url, **kwargs)
    if url.get_backend_name() == "sqlite":
        event.listen(engine, "connect", set_sqlite_pragma)
    return engine


def init_db(database_url: str):
    """
    Create engine, session factory and tables for one application.

    Returns (engine, session_factory). Nothing is cached on module level, so
    every app (and every test) owns its own database handles.
    """
    engine = create_db_engine(database_url)
    session_factory = sessionmaker(bind=engine, autoflush=False,
                                   expire_on_commit=False)
    Base.metadata.create_all(bind=engine)
    logger.info("Database ready (%s)", engine.url.render_as_string(
        hide_password=True))
    return engine, session_factory
