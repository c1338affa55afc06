"""
Declarative base shared by all tables.
"""

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func

from vibelytics.database import Base


class BaseModel(Base):
    """
    Abstract parent of every table: integer primary key plus row timestamps.

    ``created_at``/``updated_at`` record when the row was written, which is
    not the same as the event time some tables keep in ``date``.
    """

    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"
