"""
Snapgram Backend — Auth Routes
================================

    POST /api/auth/register   create account → 201 {message, token, token_type, user}
    POST /api/auth/login      email + password → 200 {message, token, token_type, user}

Both are public. Every other /api route requires the bearer token returned here.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.user import AuthResponse, LoginRequest, RegisterRequest
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=AuthResponse,
    responses={
        400: {"description": "Invalid registration data", "model": ErrorResponse},
        409: {"description": "Username or email already taken", "model": ErrorResponse},
    },
    summary="Register a new account",
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await user_service.register(
        db=db,
        username=body.username,
        email=body.email,
        password=body.password,
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid email or password", "model": ErrorResponse}},
    summary="Log in and receive a bearer token",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await user_service.authenticate(db=db, email=body.email, password=body.password)
