from pydantic import BaseModel
from typing import Optional

class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

class PasswordHashRequest(BaseModel):
    password: Optional[str] = None

class PasswordHashResponse(BaseModel):
    hash: str

class SessionResponse(BaseModel):
    authenticated: bool
    username: Optional[str] = None
