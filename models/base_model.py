#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixin for the GBA file server.

- Integer autoincrement primary key (ids are never reused)
- created_at timestamp set by the database
- save() that uses the DBStorage singleton
- to_dict() that formats timestamps and drops SQLAlchemy internals

Secret columns listed in a model's __private__ tuple are never exported by
to_dict().
"""

from __future__ import annotations

from datetime import datetime

# Importing 'models' gives access to the global 'storage' instance (DBStorage)
# defined in models/__init__.py
import models

from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

TIME_FMT = "%Y-%m-%dT%H:%M:%S.%f"

# Declarative base for all models
Base = declarative_base()


class BaseModel:
    """
    Base mixin for persistent models.
    """

    __private__: tuple = ()

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        created_at is filled by the database on insert.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)

    def __str__(self) -> str:
        """Human-friendly representation that never includes secret columns."""
        return f"[{self.__class__.__name__}] ({self.id}) {self.to_dict()}"

    def save(self):
        """Add the instance to the current session and commit."""
        models.storage.new(self)
        models.storage.save()

    def to_dict(self) -> dict:
        """
        Return a dictionary of public fields:
        - Formats created_at to TIME_FMT if it is a datetime
        - Removes SQLAlchemy internal state and __private__ columns
        """
        d = {
            k: v
            for k, v in self.__dict__.items()
            if k != "_sa_instance_state" and k not in self.__private__
        }
        if isinstance(d.get("created_at"), datetime):
            d["created_at"] = d["created_at"].strftime(TIME_FMT)
        d["__class__"] = self.__class__.__name__
        return d
