"""
Authentication Service.

Issues access/refresh token pairs and rotates refresh tokens: only the most
recently issued refresh token of a user is accepted.
"""

import logging
from typing import Optional

from fastapi import HTTPException, status
from jose import JWTError
from sqlalchemy import or_
from sqlalchemy.orm import Session

from readsy.core import security
from readsy.models.user import User
from readsy.schemas import UserCreate

logger = logging.getLogger(__name__)


class AuthService:
    def get_user_by_email(self, db: Session, email: str) -> Optional[User]:
        """Get a user by email."""
        return db.query(User).filter(User.email == email.lower()).first()

    def get_user_by_id(self, db: Session, user_id: str) -> Optional[User]:
        """Get a user by id."""
        return db.query(User).filter(User.id == user_id).first()

    def create_user(self, db: Session, user_in: UserCreate) -> User:
        """Create a new user with a hashed password."""
        email = user_in.email.lower()
        filters = [User.email == email]
        if user_in.username:
            filters.append(User.username == user_in.username)
        existing = db.query(User).filter(or_(*filters)).first()
        if existing:
            field = "email" if existing.email == email else "username"
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"A user with this {field} already exists",
            )

        db_user = User(
            email=email,
            username=user_in.username,
            display_name=user_in.display_name,
            hashed_password=security.get_password_hash(user_in.password),
        )
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
        logger.info(f"Registered user {db_user.id}")
        return db_user

    def authenticate_user(self, db: Session, email: str, password: str) -> User:
        """Authenticate a user by email and password."""
        user = self.get_user_by_email(db, email)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )
        if not user.hashed_password:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account has no password. Use social login.",
            )
        if not security.verify_password(password, user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )
        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user")
        return user

    def issue_tokens(self, db: Session, user: User) -> dict:
        """Create a token pair and remember the refresh token's digest."""
        claims = {"sub": user.id, "email": user.email, "username": user.username}
        access_token = security.create_access_token(claims)
        refresh_token = security.create_refresh_token(claims)

        user.hashed_refresh_token = security.hash_token(refresh_token)
        db.commit()
        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
        }

    def signup(self, db: Session, user_in: UserCreate) -> dict:
        user = self.create_user(db, user_in)
        return self.issue_tokens(db, user)

    def login(self, db: Session, email: str, password: str) -> dict:
        user = self.authenticate_user(db, email, password)
        logger.info(f"User {user.id} logged in")
        return self.issue_tokens(db, user)

    def refresh_tokens(self, db: Session, refresh_token: str) -> dict:
        """Exchange a valid, current refresh token for a new pair."""
        try:
            payload = security.decode_refresh_token(refresh_token)
        except JWTError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired refresh token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        user = self.get_user_by_id(db, payload.get("sub", ""))
        if not user or not user.is_active or not user.hashed_refresh_token:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

        if not security.token_matches(refresh_token, user.hashed_refresh_token):
            # Either reused after rotation or issued before a logout
            logger.warning(f"Rejected stale refresh token for user {user.id}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

        tokens = self.issue_tokens(db, user)
        logger.info(f"Rotated refresh token for user {user.id}")
        return tokens

    def logout(self, db: Session, user: User) -> bool:
        """Forget the user's refresh token."""
        user.hashed_refresh_token = None
        db.commit()
        logger.info(f"User {user.id} logged out")
        return True


auth_service = AuthService()
