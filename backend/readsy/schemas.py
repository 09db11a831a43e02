from typing import List, Optional
from datetime import datetime, date
from pydantic import BaseModel, ConfigDict, Field, EmailStr


# --- Auth ---
class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    display_name: str = Field(..., min_length=1, max_length=100)
    username: Optional[str] = Field(None, min_length=3, max_length=30, pattern=r"^[A-Za-z0-9_.]+$")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class Tokens(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    username: Optional[str] = None
    display_name: str
    avatar: Optional[str] = None
    language: str = "pt"
    is_premium: bool = False
    is_active: bool = True
    level: int = 1
    coins: int = 0


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: Optional[str] = None
    display_name: str
    avatar: Optional[str] = None


class TokenValidation(BaseModel):
    valid: bool
    user: UserResponse


# --- Leaderboard ---
class RankingEntry(BaseModel):
    rank: Optional[int] = None
    score: int = 0
    season: str
    user: UserSummary


# --- Achievements ---
class AchievementCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=50, pattern=r"^[a-z0-9-]+$")
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    icon: Optional[str] = None
    kind: str = Field(..., pattern=r"^(pages|checkins)$")
    goal: int = Field(..., ge=1)
    xp_reward: int = Field(0, ge=0)
    coins_reward: int = Field(0, ge=0)


class AchievementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    description: str
    icon: Optional[str] = None
    kind: str
    goal: int
    xp_reward: int
    coins_reward: int


class UserAchievementResponse(AchievementResponse):
    progress: int = 0
    completed: bool = False
    completed_at: Optional[datetime] = None


# --- Gamification ---
class SeasonResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    display_name: str
    start_date: date
    end_date: date


class LevelProgressResponse(BaseModel):
    xp: int
    level: int
    max_level: int
    level_start_xp: int
    xp_into_level: int
    xp_required: int
    xp_to_next_level: int
    progress: float = Field(..., ge=0, le=1)
    is_max_level: bool


class GamificationState(BaseModel):
    level: int
    total_xp: int
    season_xp: int
    coins: int
    streak: int
    last_checkin_at: Optional[datetime] = None
    last_level_up_at: Optional[datetime] = None
    xp_for_next_level: int
    is_max_level: bool
    progress: LevelProgressResponse
    achievements: List[UserAchievementResponse] = []


class LeaderboardPosition(BaseModel):
    rank: Optional[int] = None
    score: int = 0
    season: str


class UserStatusResponse(BaseModel):
    user: UserSummary
    gamification: GamificationState
    leaderboard: LeaderboardPosition
    season: SeasonResponse


class XpAwardResponse(BaseModel):
    level: int
    previous_xp: int
    current_xp: int
    total_xp: int
    leveled_up: bool
    coin_reward: int
    is_max_level: bool


class LevelReward(BaseModel):
    level: int
    xp_required: int
    coins_rewarded: int


class ChallengeOptions(BaseModel):
    xp_options: List[int]
    coins_options: List[int]


class CheckinRewardRequest(BaseModel):
    pages_read: int = Field(..., ge=1)
    minutes_spent: int = Field(..., ge=1)


class CheckinRewardResponse(BaseModel):
    xp_earned: int
    streak: int
    award: XpAwardResponse
    completed_achievements: List[str] = []


class SeasonSummary(BaseModel):
    id: int
    name: str
    display_name: str


class SeasonResetResponse(BaseModel):
    previous_season: SeasonSummary
    new_season: SeasonResponse
    rewards_distributed: int
