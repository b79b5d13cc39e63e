"""
Twitter Clone Backend - Registration and Login Routes
======================================================

What:  POST /register/ and POST /login/, the only unauthenticated API routes.
How:   Validates the JSON body shape, delegates to UserService, returns the
       v1 response formats (plain-text confirmation, `{jwtToken}`).
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from twitter_clone.database import get_db_session
from twitter_clone.schemas.common import ErrorResponse
from twitter_clone.schemas.user import LoginRequest, LoginResponse, RegisterRequest
from twitter_clone.services.user_service import user_service

router = APIRouter(tags=["Accounts"])


@router.post(
    "/register/",
    response_class=PlainTextResponse,
    responses={
        200: {"description": "User created", "content": {"text/plain": {}}},
        400: {"description": "Username taken or password too short", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> str:
    await user_service.register(db, payload)
    return "User created successfully"


@router.post(
    "/login/",
    response_model=LoginResponse,
    responses={400: {"description": "Invalid user or password", "model": ErrorResponse}},
    summary="Exchange username and password for a bearer token",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    return await user_service.login(db, payload)
