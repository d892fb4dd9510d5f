"""
Larder Backend — Account & Token Schemas
=========================================

What:  Bodies for POST /register and POST /login, their responses, and the
       `Identity` carried by a verified token.
"""

from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterResponse(BaseModel):
    message: str = Field(default="User registered")
    user_id: int = Field(alias="userId", description="New user's identifier")

    model_config = {"populate_by_name": True}


class LoginResponse(BaseModel):
    """Public profile fields plus the signed token."""
    id: int
    email: str
    username: str
    token: str = Field(description="Signed bearer token, valid for one hour")


class Identity(BaseModel):
    """
    What:  Claims embedded in a token, trusted for the rest of the request.
    Who:   Produced by `AuthService.verify_token()`, injected into protected
           routes by `dependencies.require_identity`.
    """
    id: int
    email: str
    username: str
