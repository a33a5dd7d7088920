"""
Track database model.

A named, ordered sequence of positions recorded by one user.
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey
from tracklog.app.db.session import Base


class Track(Base):
    __tablename__ = "tracks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    comment = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Track(id={self.id}, user_id={self.user_id}, name='{self.name}')>"
