"""
Persisted application settings.

Settings are stored as name/value rows (JSON encoded values) and extra
OpenLayers tile sources live in their own table.
"""

from sqlalchemy import Column, Integer, String, Text
from tracklog.app.db.session import Base


class ConfigEntry(Base):
    __tablename__ = "config"

    name = Column(String(20), primary_key=True)
    value = Column(Text, nullable=False)

    def __repr__(self):
        return f"<ConfigEntry(name='{self.name}', value={self.value!r})>"


class Layer(Base):
    __tablename__ = "ol_layers"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(50), nullable=False)
    url = Column(String(255), nullable=False)
    priority = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<Layer(id={self.id}, name='{self.name}', priority={self.priority})>"
