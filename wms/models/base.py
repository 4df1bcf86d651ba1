# wms/models/base.py

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Common declarative base for every ORM model.
    Alembic reads Base.metadata to discover the tables.
    """
    pass
