"""
User database model.

Accounts that own tracks and positions. Admins manage users and settings.
"""

from sqlalchemy import Column, Integer, String, Boolean
from tracklog.app.db.session import Base


class User(Base):
    """
    User model for authentication and ownership.

    The password column only ever holds an argon2 hash.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    login = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    is_admin = Column("admin", Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, login='{self.login}', is_admin={self.is_admin})>"
