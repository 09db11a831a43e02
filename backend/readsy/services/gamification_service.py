"""
Gamification Service.

Awards XP, recomputes levels against the configured level curve, pays
level-up coins, keeps reading streaks, advances achievements and runs the
season lifecycle.
"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from readsy.gamification import (
    CHALLENGE_COINS_OPTIONS,
    CHALLENGE_XP_OPTIONS,
    LevelCurve,
    checkin_xp,
    get_level_curve,
    level_rewards,
    level_up_coins,
    next_season,
    next_streak,
    season_for,
)
from readsy.gamification.achievements import CHECKINS, PAGES
from readsy.gamification.seasons import SeasonWindow
from readsy.models.season import Season, SeasonReward
from readsy.models.user import User
from readsy.services.achievement_service import AchievementService, achievement_service
from readsy.services.leaderboard_service import LeaderboardService, leaderboard_service

logger = logging.getLogger(__name__)


def season_reward_for_rank(rank: int) -> int:
    """Coins paid at season end for a final leaderboard rank (1-based)."""
    if rank == 1:
        return 2000
    if rank == 2:
        return 1500
    if rank == 3:
        return 1000
    if 4 <= rank <= 10:
        return 400
    if 11 <= rank <= 100:
        return 30
    return 0


class GamificationService:
    def __init__(
        self,
        curve: Optional[LevelCurve] = None,
        leaderboard: Optional[LeaderboardService] = None,
        achievements: Optional[AchievementService] = None,
    ):
        self._curve = curve
        self.leaderboard = leaderboard or leaderboard_service
        self.achievements = achievements or achievement_service

    @property
    def curve(self) -> LevelCurve:
        return self._curve or get_level_curve()

    def _get_user(self, db: Session, user_id: str) -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"User {user_id} not found",
            )
        return user

    # --- Seasons ---

    def _open_season(self, db: Session, window: SeasonWindow) -> Season:
        """Activate the season for ``window``, skipping windows already completed."""
        season = db.query(Season).filter(Season.name == window.name).first()
        while season is not None and season.completed:
            window = next_season(window)
            season = db.query(Season).filter(Season.name == window.name).first()

        if season is None:
            season = Season(
                name=window.name,
                display_name=window.display_name,
                start_date=window.start_date,
                end_date=window.end_date,
                is_active=True,
            )
            db.add(season)
            logger.info(f"Opened season {window.name}")
        else:
            season.is_active = True
        db.flush()
        return season

    def get_current_season(self, db: Session, today: Optional[date] = None) -> Season:
        """Active season, opening the calendar's season when none is running."""
        today = today or datetime.utcnow().date()
        active = (
            db.query(Season)
            .filter(Season.is_active.is_(True))
            .order_by(Season.start_date.desc())
            .first()
        )
        if active is not None and today < active.end_date:
            return active
        if active is not None:
            # Ran past its end without a reset
            active.is_active = False
        season = self._open_season(db, season_for(today))
        db.commit()
        return season

    def reset_season(self, db: Session, today: Optional[date] = None) -> dict:
        """
        Close the current season: pay rank rewards, reset levels and season XP
        of every user and open the next season.
        """
        today = today or datetime.utcnow().date()
        current = self.get_current_season(db, today)
        ranking = self.leaderboard.get_global_ranking(db, current.name)

        rewarded = 0
        for row in ranking:
            coins = season_reward_for_rank(row["rank"])
            if coins <= 0:
                continue
            user = self._get_user(db, row["user"]["id"])
            user.coins += coins
            db.add(
                SeasonReward(
                    season_id=current.id,
                    user_id=user.id,
                    rank=row["rank"],
                    coins_rewarded=coins,
                )
            )
            rewarded += 1

        current.completed = True
        current.is_active = False
        db.flush()

        window = season_for(today)
        if window.name == current.name:
            window = next_season(window)
        new_season = self._open_season(db, window)

        db.query(User).update({User.level: 1, User.season_xp: 0}, synchronize_session="fetch")
        current.rewards_issued = True
        db.commit()

        logger.info(
            f"Season {current.name} closed, {rewarded} users rewarded, "
            f"{new_season.name} opened"
        )
        return {
            "previous_season": {
                "id": current.id,
                "name": current.name,
                "display_name": current.display_name,
            },
            "new_season": {
                "id": new_season.id,
                "name": new_season.name,
                "display_name": new_season.display_name,
                "start_date": new_season.start_date,
                "end_date": new_season.end_date,
            },
            "rewards_distributed": rewarded,
        }

    # --- XP ---

    def add_xp(self, db: Session, user_id: str, amount: int) -> dict:
        """Award XP to a user, leveling up and paying coins as thresholds are crossed."""
        if amount < 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="XP amount must be at least 1",
            )
        user = self._get_user(db, user_id)
        season = self.get_current_season(db)
        curve = self.curve

        if user.level >= curve.max_level and user.season_xp >= curve.max_xp:
            # Maxed out: only lifetime XP and the leaderboard move
            user.total_xp += amount
            self.leaderboard.add_points(db, user.id, amount, season.name)
            db.commit()
            return {
                "level": user.level,
                "previous_xp": user.season_xp,
                "current_xp": user.season_xp,
                "total_xp": user.total_xp,
                "leveled_up": False,
                "coin_reward": 0,
                "is_max_level": True,
            }

        previous_xp = user.season_xp
        previous_level = user.level
        new_xp = previous_xp + amount
        new_level = max(previous_level, curve.level_for_xp(new_xp))
        coins = sum(level_up_coins(level) for level in range(previous_level + 1, new_level + 1))

        if new_level >= curve.max_level and new_xp > curve.max_xp:
            new_xp = curve.max_xp

        leveled_up = new_level > previous_level
        user.level = new_level
        user.season_xp = new_xp
        user.total_xp += amount
        user.coins += coins
        if leveled_up:
            user.last_level_up_at = datetime.utcnow()
            logger.info(f"User {user.id} reached level {new_level} (+{coins} coins)")

        self.leaderboard.add_points(db, user.id, amount, season.name)
        db.commit()
        logger.info(f"Awarded {amount} XP to user {user.id}")

        return {
            "level": user.level,
            "previous_xp": previous_xp,
            "current_xp": user.season_xp,
            "total_xp": user.total_xp,
            "leveled_up": leveled_up,
            "coin_reward": coins,
            "is_max_level": user.level >= curve.max_level,
        }

    def record_checkin(
        self,
        db: Session,
        user_id: str,
        pages_read: int,
        minutes_spent: int,
        now: Optional[datetime] = None,
    ) -> dict:
        """Update the reading streak, award XP and advance achievements for one check-in."""
        now = now or datetime.utcnow()
        user = self._get_user(db, user_id)

        user.streak = next_streak(user.streak, user.last_checkin_at, now)
        user.last_checkin_at = now
        db.flush()

        xp = checkin_xp(pages_read, minutes_spent)
        award = self.add_xp(db, user.id, xp)

        completed = self.achievements.record_progress(db, user, PAGES, pages_read, self.add_xp)
        completed += self.achievements.record_progress(db, user, CHECKINS, 1, self.add_xp)
        return {
            "xp_earned": xp,
            "streak": user.streak,
            "award": award,
            "completed_achievements": [a.code for a in completed],
        }

    # --- Read models ---

    def get_user_status(self, db: Session, user_id: str) -> dict:
        user = self._get_user(db, user_id)
        season = self.get_current_season(db)
        position = self.leaderboard.get_user_ranking(db, user.id, season.name)
        curve = self.curve

        is_max_level = user.level >= curve.max_level
        if is_max_level:
            xp_for_next_level = 0
        else:
            xp_for_next_level = max(curve.xp_for_level(user.level + 1) - user.season_xp, 0)

        return {
            "user": {
                "id": user.id,
                "username": user.username,
                "display_name": user.display_name,
                "avatar": user.avatar,
            },
            "gamification": {
                "level": user.level,
                "total_xp": user.total_xp,
                "season_xp": user.season_xp,
                "coins": user.coins,
                "streak": user.streak,
                "last_checkin_at": user.last_checkin_at,
                "last_level_up_at": user.last_level_up_at,
                "xp_for_next_level": xp_for_next_level,
                "is_max_level": is_max_level,
                "progress": curve.progress(user.season_xp).to_dict(),
                "achievements": self.achievements.get_user_achievements(db, user.id),
            },
            "leaderboard": {
                "rank": position["rank"],
                "score": position["score"],
                "season": season.name,
            },
            "season": {
                "id": season.id,
                "name": season.name,
                "display_name": season.display_name,
                "start_date": season.start_date,
                "end_date": season.end_date,
            },
        }

    def get_level_rewards(self) -> list:
        return level_rewards(self.curve)

    def get_challenge_options(self) -> dict:
        return {
            "xp_options": list(CHALLENGE_XP_OPTIONS),
            "coins_options": list(CHALLENGE_COINS_OPTIONS),
        }


gamification_service = GamificationService()
