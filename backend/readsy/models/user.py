"""
User database model.
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from readsy.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """User model with authentication and gamification state."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, index=True, nullable=True)
    display_name = Column(String, nullable=False)
    avatar = Column(String, nullable=True)
    language = Column(String(8), nullable=False, default="pt")
    is_premium = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    is_superuser = Column(Boolean, nullable=False, default=False)

    # Null for social-login accounts
    hashed_password = Column(String, nullable=True)
    # SHA-256 of the only refresh token currently accepted
    hashed_refresh_token = Column(String, nullable=True)

    # Gamification
    level = Column(Integer, nullable=False, default=1)
    total_xp = Column(Integer, nullable=False, default=0)
    season_xp = Column(Integer, nullable=False, default=0)
    coins = Column(Integer, nullable=False, default=0)
    streak = Column(Integer, nullable=False, default=0)
    last_checkin_at = Column(DateTime, nullable=True)
    last_level_up_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    leaderboard_entries = relationship(
        "LeaderboardEntry", back_populates="user", cascade="all, delete-orphan"
    )
    season_rewards = relationship("SeasonReward", back_populates="user")
    achievements = relationship(
        "UserAchievement", back_populates="user", cascade="all, delete-orphan"
    )
