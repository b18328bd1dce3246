#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
Payload validation for admin writes
"""
# ========================================================
# IMPORTS
# ========================================================
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tireshop.errors import ValidationError
from tireshop.models import Season, RATINGS


# ========================================================
# GLOABALS
# ========================================================
RE_SIZE = re.compile(r"^(\d+)/(\d+)[Rr](\d+)$")
MIN_PASSWORD_LENGTH = 6
# largest value a SQLite INTEGER column (and an id) is allowed to hold here
MAX_INT = 2**31 - 1

# wire name -> column name
TIRE_FIELDS = {
    "modelId": "model_id",
    "code": "code",
    "size": "size",
    "fuelEfficiency": "fuel_efficiency",
    "wetGrip": "wet_grip",
    "noiseLevel": "noise_level",
    "price": "price",
    "inStock": "in_stock",
    "imageUrl": "image_url",
}


# ========================================================
# FUNCTIONS
# ========================================================
def split_size(size: str):
    """'205/55R16' -> (205, 55, 16). Raises ValueError otherwise."""
    m = RE_SIZE.match(size.strip()) if isinstance(size, str) else None
    if not m:
        raise ValueError("must look like 205/55R16")
    return tuple(int(g) for g in m.groups())


def _int(value, name, minimum=None):
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and value.strip().lstrip("-").isdigit():
        number = int(value.strip())
    else:
        raise ValueError(f"{name} must be an integer")
    if minimum is not None and number < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    if number > MAX_INT:
        raise ValueError(f"{name} must be <= {MAX_INT}")
    return number


def _text(value, name):
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} is required")
    return value.strip()


def _rating(value):
    if not isinstance(value, str) or value.strip().upper() not in RATINGS:
        raise ValueError("must be a rating between A and G")
    return value.strip().upper()


def _price(value):
    """Integers are cents; decimal strings are major units ('129.99')."""
    if isinstance(value, bool):
        raise ValueError("must be a non-negative amount")
    if isinstance(value, int):
        cents = value
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError("must be a non-negative amount") from None
        if not amount.is_finite():
            raise ValueError("must be a non-negative amount")
        if amount > MAX_INT:
            raise ValueError("amount is too large")
        cents = int((amount * 100).quantize(Decimal("1"),
                                            rounding=ROUND_HALF_UP))
    else:
        raise ValueError("must be a non-negative amount")
    if cents < 0:
        raise ValueError("must be a non-negative amount")
    if cents > MAX_INT:
        raise ValueError("amount is too large")
    return cents


def _bool(value):
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ValueError("must be true or false")


def _size(value):
    split_size(value)
    return value.strip().upper()


def _url(value):
    # may be empty, the shop shows a placeholder image then
    if not isinstance(value, str):
        raise ValueError("must be a string")
    return value.strip()


_TIRE_CONVERTERS = {
    "model_id": lambda v: _int(v, "modelId", minimum=1),
    "code": lambda v: _text(v, "code"),
    "size": _size,
    "fuel_efficiency": _rating,
    "wet_grip": _rating,
    "noise_level": lambda v: _int(v, "noiseLevel", minimum=0),
    "price": _price,
    "in_stock": _bool,
    "image_url": _url,
}


def _require_mapping(data):
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.")


def validate_tire_payload(data, partial=False) -> dict:
    """
    Validate a tire create (partial=False) or patch (partial=True) body.

    Returns a dict keyed by column name, unknown keys are ignored.
    """
    _require_mapping(data)
    out = {}
    errors = {}
    for wire, column in TIRE_FIELDS.items():
        if wire not in data or data[wire] is None:
            if not partial:
                errors[wire] = "is required"
            continue
        try:
            out[column] = _TIRE_CONVERTERS[column](data[wire])
        except ValueError as e:
            errors[wire] = str(e)

    if errors:
        raise ValidationError("Invalid tire data.", errors)
    if partial and not out:
        raise ValidationError("Nothing to update.")
    return out


def validate_brand_payload(data, partial=False) -> dict:
    _require_mapping(data)
    if partial and "name" not in data:
        raise ValidationError("Nothing to update.")
    try:
        return {"name": _text(data.get("name"), "name")}
    except ValueError as e:
        raise ValidationError("Invalid brand data.", {"name": str(e)}) from e


def validate_model_payload(data, partial=False) -> dict:
    _require_mapping(data)
    out = {}
    errors = {}
    checks = {
        "name": ("name", lambda v: _text(v, "name")),
        "brandId": ("brand_id", lambda v: _int(v, "brandId", minimum=1)),
        "season": ("season", lambda v: int(Season.parse(v))),
    }
    for wire, (column, convert) in checks.items():
        if wire not in data or data[wire] is None:
            if not partial:
                errors[wire] = "is required"
            continue
        try:
            out[column] = convert(data[wire])
        except ValueError as e:
            errors[wire] = str(e)

    if errors:
        raise ValidationError("Invalid model data.", errors)
    if partial and not out:
        raise ValidationError("Nothing to update.")
    return out


def validate_credentials(data, check_length=True) -> tuple:
    _require_mapping(data)
    errors = {}
    username = data.get("username")
    password = data.get("password")
    if not isinstance(username, str) or not username.strip():
        errors["username"] = "is required"
    if not isinstance(password, str) or not password:
        errors["password"] = "is required"
    elif check_length and len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = (
            f"must be at least {MIN_PASSWORD_LENGTH} characters")
    if errors:
        raise ValidationError("Invalid credentials.", errors)
    return username.strip(), password
