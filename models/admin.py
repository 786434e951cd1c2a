from typing import Optional

from pydantic import BaseModel, Field

from models.common import CamelModel


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    message: str
    username: str


class SessionStatus(CamelModel):
    is_authenticated: bool
    username: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
