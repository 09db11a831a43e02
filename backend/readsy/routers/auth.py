"""
Authentication API endpoints.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from readsy.config import settings
from readsy.core.limiter import limiter
from readsy.database import get_db
from readsy.dependencies import get_current_user
from readsy.models.user import User
from readsy.schemas import (
    LoginRequest,
    RefreshRequest,
    Tokens,
    TokenValidation,
    UserCreate,
)
from readsy.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", response_model=Tokens, status_code=status.HTTP_201_CREATED)
async def signup(user_in: UserCreate, db: Session = Depends(get_db)) -> Any:
    """
    Register a new user and log them in.
    """
    return auth_service.signup(db, user_in)


@router.post("/login", response_model=Tokens)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def login(request: Request, data: LoginRequest, db: Session = Depends(get_db)) -> Any:
    """
    Exchange email and password for an access/refresh token pair.
    """
    return auth_service.login(db, email=data.email, password=data.password)


@router.post("/refresh", response_model=Tokens)
@limiter.limit(settings.AUTH_RATE_LIMIT)
async def refresh(request: Request, data: RefreshRequest, db: Session = Depends(get_db)) -> Any:
    """
    Rotate a refresh token. The presented token stops working afterwards.
    """
    return auth_service.refresh_tokens(db, data.refresh_token)


@router.post("/logout")
async def logout(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """
    Revoke the current refresh token.
    """
    return {"success": auth_service.logout(db, current_user)}


@router.get("/validate", response_model=TokenValidation)
async def validate_token(current_user: User = Depends(get_current_user)) -> Any:
    """
    Check that the presented access token is valid.
    """
    return {"valid": True, "user": current_user}
