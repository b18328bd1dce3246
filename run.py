#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
Entry point
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tireshop.app import create_app
from tireshop.config import HOST, PORT, APP_NAME, VERSION

logger = logging.getLogger("tireshop.run")


# ========================================================
# MAIN
# ========================================================
if __name__ == "__main__":
    app = create_app()
    ctx = app.extensions["tireshop"]

    # Start the health monitor thread once, outside the factory
    ctx.health_monitor.start_monitoring()

    logger.info("%s v%s running on http://%s:%s", APP_NAME, VERSION, HOST,
                PORT)
    try:
        app.run(host=HOST, port=PORT, debug=False)
    finally:
        ctx.close()
