#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
Database health monitor
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


# ========================================================
# CLASSES
# ========================================================
@dataclass
class DatabaseHealth:
    is_connected: bool
    pool_size: int = 0
    active_connections: int = 0
    idle_connections: int = 0
    latency_ms: float = 0.0
    last_checked: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc))
    error: Optional[str] = None

    def to_dict(self):
        body = {
            "isConnected": self.is_connected,
            "poolSize": self.pool_size,
            "activeConnections": self.active_connections,
            "idleConnections": self.idle_connections,
            "latencyMs": round(self.latency_ms, 2),
            "lastChecked": self.last_checked.isoformat(),
        }
        if self.error:
            body["error"] = self.error
        return body


class DatabaseHealthMonitor:
    """
    Pings the database and keeps the last result.

    One monitor per app; start_monitoring() runs the check periodically on
    a daemon thread until stop_monitoring().
    """

    def __init__(self, engine, interval_seconds: float = 30):
        self.engine = engine
        self.interval = interval_seconds
        self._last_health: Optional[DatabaseHealth] = None
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def last_health(self) -> Optional[DatabaseHealth]:
        with self._lock:
            return self._last_health

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def check_health(self) -> DatabaseHealth:
        start = time.perf_counter()
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            latency_ms = (time.perf_counter() - start) * 1000
            size, active, idle = pool_stats(self.engine.pool)
            health = DatabaseHealth(is_connected=True, pool_size=size,
                                    active_connections=active,
                                    idle_connections=idle,
                                    latency_ms=latency_ms)
        except SQLAlchemyError as e:
            health = DatabaseHealth(
                is_connected=False,
                latency_ms=(time.perf_counter() - start) * 1000,
                error=str(e.__cause__ or e))
            logger.error("Database health check failed: %s", health.error)

        with self._lock:
            self._last_health = health
        return health

    def start_monitoring(self):
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run,
                                        name="db-health-monitor",
                                        daemon=True)
        self._thread.start()
        logger.info("Database health monitoring started (every %ss)",
                    self.interval)

    def stop_monitoring(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1)
            self._thread = None

    def _run(self):
        while not self._stop.is_set():
            health = self.check_health()
            if not health.is_connected:
                logger.error("Database connection is down!")
            self._stop.wait(self.interval)


# ========================================================
# FUNCTIONS
# ========================================================
def pool_stats(pool):
    """(size, checked out, idle) for pools that report them, else zeros."""
    size = _call(pool, "size")
    active = _call(pool, "checkedout")
    idle = _call(pool, "checkedin")
    return size, active, idle


def _call(pool, name) -> int:
    method = getattr(pool, name, None)
    if not callable(method):
        return 0
    try:
        return int(method())
    except (TypeError, ValueError, NotImplementedError):
        return 0
