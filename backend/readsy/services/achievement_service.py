"""
Achievement Service.

Tracks progress towards achievements and pays their rewards once, when the
goal is first reached.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from readsy.gamification.achievements import DEFAULT_ACHIEVEMENTS
from readsy.models.achievement import Achievement, UserAchievement
from readsy.models.user import User
from readsy.schemas import AchievementCreate

logger = logging.getLogger(__name__)

# (db, user_id, amount) -> award summary
XpAwarder = Callable[[Session, str, int], dict]


def _achievement_progress(achievement: Achievement, row: Optional[UserAchievement] = None) -> dict:
    return {
        "id": achievement.id,
        "code": achievement.code,
        "name": achievement.name,
        "description": achievement.description,
        "icon": achievement.icon,
        "kind": achievement.kind,
        "goal": achievement.goal,
        "xp_reward": achievement.xp_reward,
        "coins_reward": achievement.coins_reward,
        "progress": row.progress if row else 0,
        "completed": row.completed if row else False,
        "completed_at": row.completed_at if row else None,
    }


class AchievementService:
    def ensure_defaults(self, db: Session) -> int:
        """Create the default catalogue entries that are missing. Returns how many were added."""
        existing = {code for (code,) in db.query(Achievement.code).all()}
        added = 0
        for data in DEFAULT_ACHIEVEMENTS:
            if data["code"] in existing:
                continue
            db.add(Achievement(**data))
            added += 1
        if added:
            db.commit()
            logger.info(f"Seeded {added} achievements")
        return added

    def create_achievement(self, db: Session, data: AchievementCreate) -> Achievement:
        if db.query(Achievement).filter(Achievement.code == data.code).first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Achievement '{data.code}' already exists",
            )
        achievement = Achievement(**data.model_dump())
        db.add(achievement)
        db.commit()
        db.refresh(achievement)
        logger.info(f"Created achievement {achievement.code}")
        return achievement

    def list_achievements(self, db: Session) -> List[Achievement]:
        return db.query(Achievement).order_by(Achievement.kind, Achievement.goal).all()

    def get_user_achievements(self, db: Session, user_id: str) -> List[dict]:
        """Every achievement with the user's progress; untouched ones show 0."""
        if not db.query(User).filter(User.id == user_id).first():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"User {user_id} not found",
            )
        rows = {
            row.achievement_id: row
            for row in db.query(UserAchievement).filter(UserAchievement.user_id == user_id)
        }
        return [
            _achievement_progress(achievement, rows.get(achievement.id))
            for achievement in self.list_achievements(db)
        ]

    def record_progress(
        self,
        db: Session,
        user: User,
        kind: str,
        amount: int,
        award_xp: XpAwarder,
    ) -> List[Achievement]:
        """
        Add ``amount`` to the user's progress on every achievement of ``kind``.

        Achievements completed by this call pay their coins directly and their
        XP through ``award_xp``.

        Returns:
            The achievements completed by this call.
        """
        if amount <= 0:
            return []

        completed: List[Achievement] = []
        for achievement in db.query(Achievement).filter(Achievement.kind == kind).all():
            row = (
                db.query(UserAchievement)
                .filter(
                    UserAchievement.user_id == user.id,
                    UserAchievement.achievement_id == achievement.id,
                )
                .first()
            )
            if row is None:
                row = UserAchievement(
                    user_id=user.id, achievement_id=achievement.id, progress=0, completed=False
                )
                db.add(row)
            if row.completed:
                continue

            row.progress += amount
            if row.progress >= achievement.goal:
                row.completed = True
                row.completed_at = datetime.utcnow()
                user.coins += achievement.coins_reward
                completed.append(achievement)
                logger.info(f"User {user.id} completed achievement {achievement.code}")
        db.flush()

        for achievement in completed:
            if achievement.xp_reward > 0:
                award_xp(db, user.id, achievement.xp_reward)
        db.commit()
        return completed


achievement_service = AchievementService()
