"""
Leaderboard Service.

Scores are kept per season name; ranks are computed on read.
"""

import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, joinedload

from readsy.models.leaderboard import LeaderboardEntry
from readsy.models.user import User

logger = logging.getLogger(__name__)


def _user_summary(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "display_name": user.display_name,
        "avatar": user.avatar,
    }


class LeaderboardService:
    def _get_user(self, db: Session, user_id: str) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"User {user_id} not found",
            )
        return user

    def add_points(self, db: Session, user_id: str, points: int, season: str) -> LeaderboardEntry:
        """Add points to the user's entry for ``season``, creating it if needed."""
        self._get_user(db, user_id)
        entry = (
            db.query(LeaderboardEntry)
            .filter(LeaderboardEntry.user_id == user_id, LeaderboardEntry.season == season)
            .first()
        )
        if entry is None:
            entry = LeaderboardEntry(user_id=user_id, season=season, score=points)
            db.add(entry)
        else:
            entry.score += points
        db.flush()
        return entry

    def get_global_ranking(self, db: Session, season: str) -> List[dict]:
        """All entries of a season, best score first."""
        entries = (
            db.query(LeaderboardEntry)
            .options(joinedload(LeaderboardEntry.user))
            .filter(LeaderboardEntry.season == season)
            .order_by(LeaderboardEntry.score.desc(), LeaderboardEntry.id.asc())
            .all()
        )
        return [
            {
                "rank": position,
                "score": entry.score,
                "season": season,
                "user": _user_summary(entry.user),
            }
            for position, entry in enumerate(entries, start=1)
        ]

    def get_user_ranking(self, db: Session, user_id: str, season: str) -> dict:
        """
        Rank of one user: 1 + number of strictly higher scores.
        Users tied on score share a rank. A user without an entry has no rank.
        """
        user = self._get_user(db, user_id)
        entry = (
            db.query(LeaderboardEntry)
            .filter(LeaderboardEntry.user_id == user_id, LeaderboardEntry.season == season)
            .first()
        )
        if entry is None:
            return {"rank": None, "score": 0, "season": season, "user": _user_summary(user)}

        higher = (
            db.query(LeaderboardEntry)
            .filter(LeaderboardEntry.season == season, LeaderboardEntry.score > entry.score)
            .count()
        )
        return {
            "rank": higher + 1,
            "score": entry.score,
            "season": season,
            "user": _user_summary(user),
        }


leaderboard_service = LeaderboardService()
