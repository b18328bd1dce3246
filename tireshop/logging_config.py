#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
Logging setup
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
import sys

# ========================================================
# GLOABALS
# ========================================================
LOGGER_NAME = "tireshop"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


# ========================================================
# FUNCTIONS
# ========================================================
def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the package logger once; later calls only adjust the level."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # avoid duplicate handlers when several apps are created (tests)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT,
                                           datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    return logger
