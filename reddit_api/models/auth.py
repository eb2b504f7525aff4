"""Token endpoint response."""

from typing import Optional

from pydantic import BaseModel


class AuthData(BaseModel):
    access_token: str
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    scope: Optional[str] = None
