#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
Domain errors
"""
from typing import Optional


class TireShopError(Exception):
    """Base class for errors the API turns into a client response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(TireShopError, ValueError):
    """Malformed filter or entity payload."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[dict] = None):
        super().__init__(message)
        self.errors = errors or {}

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.errors:
            body["errors"] = self.errors
        return body


class ConflictError(TireShopError):
    """Write rejected by a database constraint (duplicate, dangling reference)."""

    status_code = 409
