"""
LeaderboardEntry database model.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from readsy.database import Base


class LeaderboardEntry(Base):
    """Score of one user in one season."""

    __tablename__ = "leaderboard_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "season", name="uq_leaderboard_user_season"),
        Index("idx_leaderboard_season_score", "season", "score"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    season = Column(String, nullable=False, index=True)
    score = Column(Integer, nullable=False, default=0)

    # Relationships
    user = relationship("User", back_populates="leaderboard_entries")
