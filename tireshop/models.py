#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
Models
"""
# ========================================================
# IMPORTS
# ========================================================
from datetime import datetime, timezone
from enum import IntEnum
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean, ForeignKey
)


# ========================================================
# GLOABALS
# ========================================================
Base = declarative_base()

RATINGS = ("A", "B", "C", "D", "E", "F", "G")


def _utcnow():
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


class Season(IntEnum):
    """Season a tire model is built for, stored as an integer code."""
    SUMMER = 1
    WINTER = 2

    @classmethod
    def parse(cls, value) -> "Season":
        """Accept 1/2, "1"/"2" or "summer"/"winter"."""
        if isinstance(value, bool):
            raise ValueError(f"Invalid season: {value!r}")
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        text = str(value).strip().lower()
        if text.isdigit():
            return cls(int(text))
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(f"Invalid season: {value!r}") from None

    @property
    def label(self) -> str:
        return self.name.lower()


# ========================================================
# CLASSES (MODELS from BASE)
# ========================================================
class User(Base):
    """
    User Class
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    def to_dict(self):
        # never expose the password hash
        return {
            "id": self.id,
            "username": self.username,
            "isAdmin": bool(self.is_admin),
            "createdAt": _iso(self.created_at),
        }


class Brand(Base):
    """
    Brand Class
    """
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow,
                        nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class TireModel(Base):
    """
    Tire model (product line) of a brand. Owns the season.
    """
    __tablename__ = "models"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=False,
                      index=True)
    # 1 summer, 2 winter
    season = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow,
                        nullable=False)

    brand = relationship("Brand", lazy="joined")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "brandId": self.brand_id,
            "season": self.season,
            "brand": self.brand.to_dict() if self.brand else None,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class Tire(Base):
    """
    Tire Class (one sellable SKU)
    """
    __tablename__ = "tires"

    id = Column(Integer, primary_key=True)
    model_id = Column(Integer, ForeignKey("models.id"), nullable=False,
                      index=True)
    # equipment marker, e.g. 'RSC', 'SEAL', 'XL'
    code = Column(String(50), nullable=False)
    # e.g. '205/55R16'
    size = Column(String(50), nullable=False, index=True)
    fuel_efficiency = Column(String(1), nullable=False)
    wet_grip = Column(String(1), nullable=False)
    # dB
    noise_level = Column(Integer, nullable=False)
    # cents
    price = Column(Integer, nullable=False)
    in_stock = Column(Boolean, nullable=False, default=True)
    image_url = Column(String(255), nullable=False, default="")

    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow,
                        nullable=False)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    model = relationship("TireModel", lazy="joined")

    @property
    def season(self):
        return Season(self.model.season) if self.model else None

    def to_dict(self):
        return {
            "id": self.id,
            "modelId": self.model_id,
            "model": self.model.to_dict() if self.model else None,
            "code": self.code,
            "size": self.size,
            "fuelEfficiency": self.fuel_efficiency,
            "wetGrip": self.wet_grip,
            "noiseLevel": self.noise_level,
            "price": self.price,
            "inStock": bool(self.in_stock),
            "imageUrl": self.image_url,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
            "createdById": self.created_by_id,
        }
