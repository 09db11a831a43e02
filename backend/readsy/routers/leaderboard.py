"""
Leaderboard API endpoints.
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from readsy.database import get_db
from readsy.dependencies import get_current_user
from readsy.models.user import User
from readsy.schemas import RankingEntry
from readsy.services.gamification_service import gamification_service
from readsy.services.leaderboard_service import leaderboard_service

router = APIRouter()


def _season_name(db: Session, season: Optional[str]) -> str:
    return season or gamification_service.get_current_season(db).name


@router.get("", response_model=List[RankingEntry])
async def get_global_ranking(
    season: Optional[str] = Query(None, description="Season name, e.g. 2024-Spring"),
    db: Session = Depends(get_db),
) -> Any:
    """Ranking of all users in a season (current season by default)."""
    return leaderboard_service.get_global_ranking(db, _season_name(db, season))


@router.get("/me", response_model=RankingEntry)
async def get_my_ranking(
    season: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """Rank of the current user."""
    return leaderboard_service.get_user_ranking(db, current_user.id, _season_name(db, season))


@router.get("/user/{user_id}", response_model=RankingEntry)
async def get_user_ranking(
    user_id: str,
    season: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    """Rank of a specific user."""
    return leaderboard_service.get_user_ranking(db, user_id, _season_name(db, season))
