"""Declarative base shared by the document, array-index and audit tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
