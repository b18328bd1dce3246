#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
Catalog filters

Turns the sparse query-string filters of the catalog into a list of
(field, op, value) conditions, and compiles that list into one SQL
conjunction. Absent filters add no condition, so adding a filter can only
shrink the result.
"""
# ========================================================
# IMPORTS
# ========================================================
import fnmatch
import re
from dataclasses import dataclass
from typing import List, NamedTuple, Optional
from sqlalchemy import and_, true
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tireshop.errors import ValidationError
from tireshop.models import Tire, TireModel, Season, RATINGS
from tireshop.validation import MAX_INT


# ========================================================
# GLOABALS
# ========================================================
RE_DIGITS = re.compile(r"^\d+$")

# wire name -> TireFilters attribute
QUERY_FIELDS = {
    "width": "width",
    "aspect": "aspect",
    "diameter": "diameter",
    "inStock": "in_stock",
    "code": "code",
    "modelSeason": "model_season",
    "fuelEfficiency": "fuel_efficiency",
    "wetGrip": "wet_grip",
    "maxNoiseLevel": "max_noise_level",
}

EQ = "eq"
LIKE = "like"
LTE = "lte"

# condition field -> column
COLUMNS = {
    "size": Tire.size,
    "code": Tire.code,
    "in_stock": Tire.in_stock,
    "fuel_efficiency": Tire.fuel_efficiency,
    "wet_grip": Tire.wet_grip,
    "noise_level": Tire.noise_level,
    "model_season": TireModel.season,
}


# ========================================================
# CLASSES
# ========================================================
class Condition(NamedTuple):
    field: str
    op: str
    value: object


@dataclass(frozen=True)
class TireFilters:
    """Optional catalog constraints; None means no constraint on that axis."""
    width: Optional[str] = None
    aspect: Optional[str] = None
    diameter: Optional[str] = None
    in_stock: Optional[bool] = None
    code: Optional[str] = None
    model_season: Optional[Season] = None
    fuel_efficiency: Optional[str] = None
    wet_grip: Optional[str] = None
    max_noise_level: Optional[int] = None

    @classmethod
    def from_query(cls, args) -> "TireFilters":
        """
        Parse query-string values (any mapping with .get()).

        Raises ValidationError on malformed values; empty strings count as
        absent.
        """
        values = {}
        errors = {}
        for key, attr in QUERY_FIELDS.items():
            raw = args.get(key)
            if raw is None:
                continue
            raw = str(raw).strip()
            if raw == "":
                continue
            try:
                values[attr] = _PARSERS[attr](raw)
            except ValueError as e:
                errors[key] = str(e)

        if errors:
            raise ValidationError("Invalid tire filters.", errors)
        return cls(**values)

    def is_empty(self) -> bool:
        return not build_conditions(self)


# ========================================================
# FUNCTIONS
# ========================================================
def _parse_size_part(raw: str) -> str:
    if not RE_DIGITS.match(raw):
        raise ValueError("must be a number")
    return raw


def _parse_bool(raw: str) -> bool:
    value = raw.lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError("must be 'true' or 'false'")


def _parse_rating(raw: str) -> str:
    value = raw.upper()
    if value not in RATINGS:
        raise ValueError("must be a rating between A and G")
    return value


def _parse_noise(raw: str) -> int:
    if not RE_DIGITS.match(raw):
        raise ValueError("must be a non-negative integer")
    value = int(raw)
    if value > MAX_INT:
        raise ValueError(f"must be <= {MAX_INT}")
    return value


def _parse_season(raw: str) -> Season:
    try:
        return Season.parse(raw)
    except ValueError:
        raise ValueError("must be 1 (summer) or 2 (winter)") from None


_PARSERS = {
    "width": _parse_size_part,
    "aspect": _parse_size_part,
    "diameter": _parse_size_part,
    "in_stock": _parse_bool,
    "code": lambda raw: raw,
    "model_season": _parse_season,
    "fuel_efficiency": _parse_rating,
    "wet_grip": _parse_rating,
    "max_noise_level": _parse_noise,
}


def build_conditions(filters: Optional[TireFilters]) -> List[Condition]:
    """
    Translate filters into AND-ed conditions, in a fixed order.

    LIKE patterns only ever hold digits, '/', 'R' and the '%' wildcard.
    """
    if filters is None:
        return []
    conds = []

    # size '205/55R16': each given component is matched in its own slot
    if filters.width is not None:
        conds.append(Condition("size", LIKE, f"{filters.width}/%"))
    if filters.aspect is not None:
        conds.append(Condition("size", LIKE, f"%/{filters.aspect}R%"))
    if filters.diameter is not None:
        conds.append(Condition("size", LIKE, f"%R{filters.diameter}"))

    if filters.in_stock is not None:
        conds.append(Condition("in_stock", EQ, filters.in_stock))
    if filters.code is not None:
        conds.append(Condition("code", EQ, filters.code))
    if filters.model_season is not None:
        conds.append(Condition("model_season", EQ, int(filters.model_season)))
    if filters.fuel_efficiency is not None:
        conds.append(Condition("fuel_efficiency", EQ,
                               filters.fuel_efficiency))
    if filters.wet_grip is not None:
        conds.append(Condition("wet_grip", EQ, filters.wet_grip))
    if filters.max_noise_level is not None:
        conds.append(Condition("noise_level", LTE, filters.max_noise_level))
    return conds


def compile_conditions(conditions: List[Condition]):
    """Compile conditions into a single SQLAlchemy AND clause."""
    clauses = []
    for cond in conditions:
        column = COLUMNS[cond.field]
        if cond.op == EQ:
            clauses.append(column == cond.value)
        elif cond.op == LIKE:
            clauses.append(column.like(cond.value))
        elif cond.op == LTE:
            clauses.append(column <= cond.value)
        else:
            raise KeyError(f"Unknown operator {cond.op!r}")
    if not clauses:
        return true()
    return and_(*clauses)


def _record_value(tire, field):
    if field == "model_season":
        return tire.season
    return getattr(tire, field)


def matches(tire, conditions: List[Condition]) -> bool:
    """Evaluate conditions against an in-memory tire (no database)."""
    for cond in conditions:
        value = _record_value(tire, cond.field)
        if cond.op == EQ:
            ok = value == cond.value
        elif cond.op == LIKE:
            # case-insensitive like SQLite LIKE, '%' is the one wildcard
            ok = value is not None and fnmatch.fnmatchcase(
                value.upper(), cond.value.upper().replace("%", "*"))
        elif cond.op == LTE:
            ok = value is not None and value <= cond.value
        else:
            raise KeyError(f"Unknown operator {cond.op!r}")
        if not ok:
            return False
    return True
