# backend/beautyplaza/models/setting.py
"""Key/value application settings editable by administrators."""

from sqlalchemy import JSON, Column, DateTime, String, Text
from sqlalchemy.sql import func

from ..database import Base


class Setting(Base):
    """A named JSON value, grouped by category for the admin console."""

    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(JSON, nullable=True)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<Setting {self.key}={self.value!r}>"
