"""
Gamification API endpoints: status, XP awards, level rewards, achievements
and seasons.
"""

from typing import Any, List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from readsy.database import get_db
from readsy.dependencies import get_current_admin, get_current_user
from readsy.models.user import User
from readsy.schemas import (
    AchievementCreate,
    AchievementResponse,
    ChallengeOptions,
    CheckinRewardRequest,
    CheckinRewardResponse,
    LevelReward,
    SeasonResetResponse,
    UserAchievementResponse,
    UserStatusResponse,
    XpAwardResponse,
)
from readsy.services.achievement_service import achievement_service
from readsy.services.gamification_service import gamification_service

router = APIRouter()


@router.get("/status", response_model=UserStatusResponse)
async def get_my_status(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """Gamification status of the current user."""
    return gamification_service.get_user_status(db, current_user.id)


@router.get("/status/{user_id}", response_model=UserStatusResponse)
async def get_user_status(
    user_id: str,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
) -> Any:
    """Gamification status of any user (admin)."""
    return gamification_service.get_user_status(db, user_id)


@router.post("/xp/{user_id}/{amount}", response_model=XpAwardResponse)
async def add_xp(
    user_id: str,
    amount: int = Path(..., ge=1),
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
) -> Any:
    """Award XP to a user (admin)."""
    return gamification_service.add_xp(db, user_id, amount)


@router.get("/level-rewards", response_model=List[LevelReward])
async def get_level_rewards() -> Any:
    """XP required and coins paid for every level."""
    return gamification_service.get_level_rewards()


@router.get("/challenge-options", response_model=ChallengeOptions)
async def get_challenge_options() -> Any:
    """XP and coin values offered when creating a challenge."""
    return gamification_service.get_challenge_options()


@router.post("/checkin", response_model=CheckinRewardResponse)
async def reward_checkin(
    data: CheckinRewardRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """Update the streak and award XP for a reading check-in."""
    return gamification_service.record_checkin(
        db, current_user.id, data.pages_read, data.minutes_spent
    )


@router.post("/reset-season", response_model=SeasonResetResponse)
async def reset_season(
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
) -> Any:
    """Close the season, pay rank rewards and open the next one (admin)."""
    return gamification_service.reset_season(db)


@router.get("/achievements", response_model=List[AchievementResponse])
async def list_achievements(db: Session = Depends(get_db)) -> Any:
    """The achievement catalogue."""
    return achievement_service.list_achievements(db)


@router.get("/achievements/me", response_model=List[UserAchievementResponse])
async def get_my_achievements(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    return achievement_service.get_user_achievements(db, current_user.id)


@router.post(
    "/achievements",
    response_model=AchievementResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_achievement(
    data: AchievementCreate,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
) -> Any:
    """Add an achievement to the catalogue (admin)."""
    return achievement_service.create_achievement(db, data)
