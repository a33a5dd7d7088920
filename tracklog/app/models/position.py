"""
Position database model.

One GPS fix reported by a client. Positions are immutable apart from
their comment and attached image.
"""

from sqlalchemy import Column, Integer, Float, String, Text, ForeignKey, DateTime, Index
from tracklog.app.db.session import Base


class Position(Base):
    """
    Position model.

    Within a track positions are ordered by (time, id).
    """
    __tablename__ = "positions"
    __table_args__ = (
        Index("idx_positions_track_time", "track_id", "time"),
        Index("idx_positions_user_time", "user_id", "time"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    time = Column(DateTime(timezone=True), nullable=False)

    # References
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    track_id = Column(Integer, ForeignKey("tracks.id", ondelete="CASCADE"), nullable=False)

    # GPS fix
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    altitude = Column(Float, nullable=True)
    speed = Column(Float, nullable=True)  # m/s
    bearing = Column(Float, nullable=True)
    accuracy = Column(Integer, nullable=True)  # meters
    provider = Column(String(100), nullable=True)

    # User annotations
    comment = Column(Text, nullable=True)
    image = Column(String(100), nullable=True)

    def __repr__(self):
        return f"<Position(id={self.id}, track_id={self.track_id}, lat={self.latitude}, lon={self.longitude})>"
