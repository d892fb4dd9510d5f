"""
Larder Backend — Route Dependencies
====================================

What:  FastAPI dependencies that hand routes their services and the
       caller's identity.
How:   Services live on `app.state` (set by `create_app()`), so tests
       build an app around fakes instead of patching module globals.

Auth:
    The Authorization header carries the bare token, with no "Bearer "
    scheme, so it is read as a plain header rather than through
    fastapi.security.HTTPBearer.
"""

from typing import Optional

from fastapi import Header, Request

from larder.schemas.auth import Identity
from larder.services.auth_service import AuthService
from larder.services.pantry_service import PantryService
from larder.services.recipe_service import RecipeService
from larder.services.scan_service import ScanService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_pantry_service(request: Request) -> PantryService:
    return request.app.state.pantry_service


def get_scan_service(request: Request) -> ScanService:
    return request.app.state.scan_service


def get_recipe_service(request: Request) -> RecipeService:
    return request.app.state.recipe_service


def require_identity(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> Identity:
    """
    Verify the raw token and expose its identity to the route.

    Raises MissingTokenError (403) or AuthError (401) through
    `AuthService.verify_token()`; the route body never runs.
    """
    identity = get_auth_service(request).verify_token(authorization)
    request.state.user = identity
    return identity
