"""
Season and SeasonReward database models.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from readsy.database import Base


class Season(Base):
    """A gamification season; season XP and leaderboard scores reset between seasons."""

    __tablename__ = "seasons"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)  # e.g. "2024-Spring"
    display_name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    completed = Column(Boolean, nullable=False, default=False)
    rewards_issued = Column(Boolean, nullable=False, default=False)

    # Relationships
    rewards = relationship("SeasonReward", back_populates="season", cascade="all, delete-orphan")


class SeasonReward(Base):
    """Coins paid to a user for their final rank in a season."""

    __tablename__ = "season_rewards"

    id = Column(Integer, primary_key=True, index=True)
    season_id = Column(Integer, ForeignKey("seasons.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    rank = Column(Integer, nullable=False)
    coins_rewarded = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    season = relationship("Season", back_populates="rewards")
    user = relationship("User", back_populates="season_rewards")
