"""
User Pydantic schemas.
"""

from typing import Optional
from pydantic import Field
from tracklog.app.schemas.common import CamelModel


class UserResponse(CamelModel):
    id: int
    login: str
    is_admin: bool


class UserCreate(CamelModel):
    """
    Schema for creating a user.

    Used by POST /users (admins only).
    """
    login: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., description="Checked against the configured password policy")
    is_admin: bool = False


class UserUpdate(CamelModel):
    """
    Schema for an admin editing another user.

    Password is only changed when present.
    """
    id: Optional[int] = None
    login: Optional[str] = None
    is_admin: bool = False
    password: Optional[str] = None


class PasswordChange(CamelModel):
    password: str
    old_password: str
