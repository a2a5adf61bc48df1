from typing import Optional

from pydantic import BaseModel


class CurrentUser(BaseModel):
    """Caller identity as resolved from the session token."""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None


class CurrentUserResponse(BaseModel):
    user: Optional[CurrentUser] = None
    is_admin: bool = False
