"""
Session Pydantic schemas.

Used by the login, logout and session check endpoints.
"""

from typing import Optional
from pydantic import Field
from tracklog.app.schemas.common import CamelModel


class LoginRequest(CamelModel):
    login: str = Field(..., description="User login")
    password: str = Field(..., description="Password")


class SessionResponse(CamelModel):
    """
    Session state returned by GET/POST /session.

    User fields are only present for an authenticated session. The token
    is only returned on login.
    """
    is_authenticated: bool
    is_admin: Optional[bool] = None
    user_id: Optional[int] = None
    user_login: Optional[str] = None
    access_token: Optional[str] = None
    token_type: Optional[str] = None
