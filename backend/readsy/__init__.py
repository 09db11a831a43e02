"""Readsy: social reading API, gamification rules and API client."""

__version__ = "1.0.0"
