"""
Achievement kinds and the catalogue seeded on startup.
"""

PAGES = "pages"
CHECKINS = "checkins"
ACHIEVEMENT_KINDS = (PAGES, CHECKINS)

DEFAULT_ACHIEVEMENTS = (
    {
        "code": "first-checkin",
        "name": "First check-in",
        "description": "Log your first reading session",
        "kind": CHECKINS,
        "goal": 1,
        "xp_reward": 20,
        "coins_reward": 5,
    },
    {
        "code": "checkins-30",
        "name": "30 check-ins",
        "description": "Log 30 reading sessions",
        "kind": CHECKINS,
        "goal": 30,
        "xp_reward": 210,
        "coins_reward": 25,
    },
    {
        "code": "pages-100",
        "name": "100 pages",
        "description": "Read 100 pages",
        "kind": PAGES,
        "goal": 100,
        "xp_reward": 50,
        "coins_reward": 10,
    },
    {
        "code": "pages-1000",
        "name": "1000 pages",
        "description": "Read 1000 pages",
        "kind": PAGES,
        "goal": 1000,
        "xp_reward": 340,
        "coins_reward": 30,
    },
)
