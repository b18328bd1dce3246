#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
Tire shop: catalog, recommendations and admin back-office API
"""
from tireshop.config import VERSION, APP_NAME

__version__ = VERSION
__all__ = ["APP_NAME", "__version__"]
