"""
Twitter Clone Backend - Account Schemas
========================================

What:  Request bodies for registration/login and the follow-list response item.

All request fields are plain strings; business rules (password length,
username uniqueness) are enforced by UserService, not here, so the error
messages stay those of the v1 API.
"""

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Body of POST /register/."""
    username: str = Field(description="Unique login name")
    password: str = Field(description="Plain-text password, at least 6 characters")
    name: str = Field(description="Display name shown in follow lists and replies")
    gender: str = Field(description="Free-form gender value")


class LoginRequest(BaseModel):
    """Body of POST /login/."""
    username: str
    password: str


class LoginResponse(BaseModel):
    """Successful login: the signed bearer token."""
    jwt_token: str = Field(alias="jwtToken", description="Bearer token for the Authorization header")

    model_config = {"populate_by_name": True}


class UserName(BaseModel):
    """One entry of GET /user/following/ or GET /user/followers/."""
    name: str = Field(description="Display name (not the username)")
