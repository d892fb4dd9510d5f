"""
Larder Backend — Account Routes
================================

What:  POST /register and POST /login.
How:   JSON bodies are parsed leniently (every field optional) so that a
       missing field produces the service's "Please fill all fields"
       message instead of a schema error.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from larder.dependencies import get_auth_service
from larder.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from larder.schemas.common import ErrorResponse
from larder.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    responses={
        400: {"description": "Missing field or email already registered", "model": ErrorResponse},
        500: {"description": "Hashing or insert failed", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def register(
    body: Optional[RegisterRequest] = None,
    auth_service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    body = body or RegisterRequest()
    return await auth_service.register(
        username=body.username,
        email=body.email,
        password=body.password,
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Missing field", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
    },
    summary="Exchange credentials for a one-hour token",
)
async def login(
    body: Optional[LoginRequest] = None,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    """
    The returned token goes, as-is, into the Authorization header of
    every protected request.
    """
    body = body or LoginRequest()
    return await auth_service.login(email=body.email, password=body.password)
