#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-10-19 09:12:40
# @Author  : Tom Brandherm (https://github.com/tombo92)
"""
Repositories for catalog and user records
"""
# ========================================================
# IMPORTS
# ========================================================
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash
# --------------------------------------------------------
# Local Imports
# --------------------------------------------------------
from tireshop.errors import ConflictError
from tireshop.filters import TireFilters, build_conditions, compile_conditions
from tireshop.models import Brand, Tire, TireModel, User
from tireshop.validation import (
    MAX_INT, validate_brand_payload, validate_model_payload,
    validate_tire_payload
)

logger = logging.getLogger(__name__)


def _utcnow():
    return datetime.now(timezone.utc)


# ========================================================
# CLASSES
# ========================================================
class _SessionRepository:
    """Opens one short-lived session per operation."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    @contextmanager
    def _session(self):
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def _get(self, db, entity, key: int):
        # ids beyond the INTEGER range never exist
        if key > MAX_INT:
            return None
        return db.get(entity, key)

    def _commit(self, db, conflict_message: str):
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning("%s (%s)", conflict_message, e.orig)
            raise ConflictError(conflict_message) from e


class TireRepository(_SessionRepository):
    """CRUD for tires, brands and tire models."""

    # ----------------------------------------------------
    # Tires
    # ----------------------------------------------------
    def list_tires(self, filters: Optional[TireFilters] = None) -> List[Tire]:
        """
        List tires matching the filters, in storage order.

        Parameters
        ----------
        filters : TireFilters, optional
            Unset fields put no constraint on the result.

        Returns
        -------
        List[Tire]
        """
        clause = compile_conditions(build_conditions(filters))
        with self._session() as db:
            return (db.query(Tire)
                    .join(TireModel, Tire.model_id == TireModel.id)
                    .filter(clause)
                    .order_by(Tire.id.asc())
                    .all())

    def get_tire(self, tire_id: int) -> Optional[Tire]:
        """Fetch a single tire by ID (None if missing)."""
        with self._session() as db:
            return self._get(db, Tire, tire_id)

    def create_tire(self, data: dict, actor_id: Optional[int]) -> Tire:
        """
        Validate and insert a tire.

        Parameters
        ----------
        data : dict
            Wire payload (camelCase keys).
        actor_id : int, optional
            ID of the admin creating the record.

        Returns
        -------
        Tire
            The stored record incl. id and timestamps.
        """
        values = validate_tire_payload(data)
        with self._session() as db:
            tire = Tire(**values, created_by_id=actor_id)
            db.add(tire)
            self._commit(db, "Unknown tire model.")
            db.refresh(tire)
            logger.info("Tire %s created (%s) by user %s", tire.id,
                        tire.size, actor_id)
            return tire

    def update_tire(self, tire_id: int, data: dict) -> Optional[Tire]:
        """Apply a partial patch. Returns the updated tire or None."""
        values = validate_tire_payload(data, partial=True)
        with self._session() as db:
            tire = self._get(db, Tire, tire_id)
            if tire is None:
                return None
            for column, value in values.items():
                setattr(tire, column, value)
            tire.updated_at = _utcnow()
            self._commit(db, "Unknown tire model.")
            db.refresh(tire)
            logger.info("Tire %s updated (%s)", tire_id,
                        ", ".join(sorted(values)))
            return tire

    def delete_tire(self, tire_id: int) -> bool:
        """Hard delete. Returns False if the tire does not exist."""
        with self._session() as db:
            tire = self._get(db, Tire, tire_id)
            if tire is None:
                return False
            db.delete(tire)
            db.commit()
            logger.info("Tire %s deleted", tire_id)
            return True

    # ----------------------------------------------------
    # Brands
    # ----------------------------------------------------
    def list_brands(self) -> List[Brand]:
        with self._session() as db:
            return db.query(Brand).order_by(Brand.name.asc()).all()

    def get_brand(self, brand_id: int) -> Optional[Brand]:
        with self._session() as db:
            return self._get(db, Brand, brand_id)

    def create_brand(self, data: dict) -> Brand:
        values = validate_brand_payload(data)
        with self._session() as db:
            brand = Brand(**values)
            db.add(brand)
            self._commit(db, "Brand already exists.")
            return brand

    def update_brand(self, brand_id: int, data: dict) -> Optional[Brand]:
        values = validate_brand_payload(data, partial=True)
        with self._session() as db:
            brand = self._get(db, Brand, brand_id)
            if brand is None:
                return None
            brand.name = values["name"]
            brand.updated_at = _utcnow()
            self._commit(db, "Brand already exists.")
            return brand

    def delete_brand(self, brand_id: int) -> bool:
        with self._session() as db:
            brand = self._get(db, Brand, brand_id)
            if brand is None:
                return False
            db.delete(brand)
            self._commit(db, "Brand still has tire models.")
            return True

    # ----------------------------------------------------
    # Tire models
    # ----------------------------------------------------
    def list_models(self, brand_id: Optional[int] = None) -> List[TireModel]:
        with self._session() as db:
            query = db.query(TireModel)
            if brand_id is not None:
                query = query.filter(TireModel.brand_id == brand_id)
            return query.order_by(TireModel.name.asc(),
                                  TireModel.id.asc()).all()

    def get_model(self, model_id: int) -> Optional[TireModel]:
        with self._session() as db:
            return self._get(db, TireModel, model_id)

    def create_model(self, data: dict) -> TireModel:
        values = validate_model_payload(data)
        with self._session() as db:
            model = TireModel(**values)
            db.add(model)
            self._commit(db, "Unknown brand.")
            db.refresh(model)
            return model

    def update_model(self, model_id: int, data: dict) -> Optional[TireModel]:
        values = validate_model_payload(data, partial=True)
        with self._session() as db:
            model = self._get(db, TireModel, model_id)
            if model is None:
                return None
            for column, value in values.items():
                setattr(model, column, value)
            model.updated_at = _utcnow()
            self._commit(db, "Unknown brand.")
            db.refresh(model)
            return model

    def delete_model(self, model_id: int) -> bool:
        with self._session() as db:
            model = self._get(db, TireModel, model_id)
            if model is None:
                return False
            db.delete(model)
            self._commit(db, "Tire model still has tires.")
            return True


class UserRepository(_SessionRepository):
    """Accounts for the session login."""

    def get_user(self, user_id: int) -> Optional[User]:
        with self._session() as db:
            return self._get(db, User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._session() as db:
            return db.query(User).filter(User.username == username).first()

    def list_users(self) -> List[User]:
        with self._session() as db:
            return db.query(User).order_by(User.username.asc()).all()

    def create_user(self, username: str, password: str,
                    is_admin: bool = False) -> User:
        """Store a new user with a hashed password."""
        with self._session() as db:
            user = User(username=username,
                        password_hash=generate_password_hash(password),
                        is_admin=is_admin)
            db.add(user)
            self._commit(db, "Username already taken.")
            logger.info("User %s created (admin=%s)", username, is_admin)
            return user

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """Return the user if the password matches, else None."""
        user = self.get_user_by_username(username)
        if user is None or not check_password_hash(user.password_hash,
                                                   password):
            return None
        return user

    def set_admin(self, username: str, is_admin: bool) -> bool:
        with self._session() as db:
            user = db.query(User).filter(User.username == username).first()
            if user is None:
                return False
            user.is_admin = is_admin
            db.commit()
            return True
