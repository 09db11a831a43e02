"""
Resource wrappers over the Readsy REST endpoints.

Each wrapper is a thin mapping from a method to an HTTP call; request and
response bodies are plain dicts.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from readsy.client.api import ReadsyClient


class Resource:
    def __init__(self, client: "ReadsyClient"):
        self._client = client

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return await self._client.request("GET", path, params=params, **kwargs)

    async def _post(self, path: str, json: Any = None, **kwargs) -> Any:
        return await self._client.request("POST", path, json=json, **kwargs)

    async def _patch(self, path: str, json: Any = None) -> Any:
        return await self._client.request("PATCH", path, json=json)

    async def _delete(self, path: str) -> Any:
        return await self._client.request("DELETE", path)


class UsersApi(Resource):
    async def me(self) -> Dict[str, Any]:
        return await self._get("/users/me")

    async def update_me(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._patch("/users/me", data)


class ShelvesApi(Resource):
    async def list(self):
        return await self._get("/shelves")

    async def get(self, shelf_id: str):
        return await self._get(f"/shelves/{shelf_id}")

    async def create(self, data: Dict[str, Any]):
        return await self._post("/shelves", data)

    async def update(self, shelf_id: str, data: Dict[str, Any]):
        return await self._patch(f"/shelves/{shelf_id}", data)

    async def remove(self, shelf_id: str):
        return await self._delete(f"/shelves/{shelf_id}")

    async def list_public_by_user(self, user_id: str):
        return await self._get(f"/shelves/public/{user_id}")

    async def list_books(self, shelf_id: str):
        return await self._get(f"/shelves/{shelf_id}/books")

    async def add_book(self, shelf_id: str, data: Dict[str, Any]):
        return await self._post(f"/shelves/{shelf_id}/books", data)

    async def update_book(self, shelf_id: str, book_id: str, data: Dict[str, Any]):
        return await self._patch(f"/shelves/{shelf_id}/books/{book_id}", data)

    async def remove_book(self, shelf_id: str, book_id: str):
        return await self._delete(f"/shelves/{shelf_id}/books/{book_id}")


class BooksApi(Resource):
    async def create(self, data: Dict[str, Any]):
        return await self._post("/books", data)

    async def get(self, book_id: str):
        return await self._get(f"/books/{book_id}")

    async def search(self, query: str):
        return await self._get("/books/search", params={"q": query})


class FavoritesApi(Resource):
    async def add(self, book_id: str, rating: Optional[int] = None, read: Optional[bool] = None):
        data = {k: v for k, v in (("rating", rating), ("read", read)) if v is not None}
        return await self._post(f"/favorites/{book_id}", data or None)

    async def remove(self, book_id: str):
        return await self._delete(f"/favorites/{book_id}")

    async def list(self):
        return await self._get("/favorites")

    async def check(self, book_id: str):
        return await self._get(f"/favorites/{book_id}/check")

    async def update(self, book_id: str, data: Dict[str, Any]):
        return await self._post(f"/favorites/{book_id}/update", data)


class WishlistApi(Resource):
    async def add(self, book_id: str):
        return await self._post(f"/wishlist/{book_id}")

    async def remove(self, book_id: str):
        return await self._delete(f"/wishlist/{book_id}")

    async def list(self):
        return await self._get("/wishlist")

    async def check(self, book_id: str):
        return await self._get(f"/wishlist/{book_id}/check")

    async def generate_slug(self):
        return await self._get("/wishlist/slug/generate")

    async def get_slug(self):
        return await self._get("/wishlist/slug")


class PublicWishlistApi(Resource):
    async def get(self, slug: str):
        return await self._get(f"/public/wishlist/{slug}", authenticated=False)


class CheckinsApi(Resource):
    async def create(
        self,
        book_id: str,
        pages_read: int,
        minutes_spent: int,
        current_page: Optional[int] = None,
        audio_note_url: Optional[str] = None,
    ):
        data: Dict[str, Any] = {
            "book_id": book_id,
            "pages_read": pages_read,
            "minutes_spent": minutes_spent,
        }
        if current_page is not None:
            data["current_page"] = current_page
        if audio_note_url is not None:
            data["audio_note_url"] = audio_note_url
        return await self._post("/checkins", data)

    async def upload_audio(self, data: Dict[str, Any]):
        return await self._post("/checkins/audio", data)

    async def history(self, book_id: str):
        return await self._post(f"/checkins/history/{book_id}")

    async def stats(self):
        return await self._post("/checkins/stats")


class GroupsApi(Resource):
    async def list(self):
        return await self._get("/groups")

    async def get(self, group_id: str):
        return await self._get(f"/groups/{group_id}")

    async def create(self, data: Dict[str, Any]):
        return await self._post("/groups", data)

    async def update(self, group_id: str, data: Dict[str, Any]):
        return await self._patch(f"/groups/{group_id}", data)

    async def join(self, group_id: str):
        return await self._post(f"/groups/{group_id}/join")

    async def leave(self, group_id: str):
        return await self._post(f"/groups/{group_id}/leave")

    async def members(self, group_id: str):
        return await self._get(f"/groups/{group_id}/members")


class ChallengesApi(Resource):
    async def list(self):
        return await self._get("/challenges")

    async def get(self, challenge_id: str):
        return await self._get(f"/challenges/{challenge_id}")

    async def join(self, challenge_id: str):
        return await self._post(f"/challenges/{challenge_id}/join")

    async def progress(self, challenge_id: str):
        return await self._get(f"/challenges/{challenge_id}/progress")


class GamificationApi(Resource):
    async def status(self):
        return await self._get("/gamification/status")

    async def level_rewards(self):
        return await self._get("/gamification/level-rewards", authenticated=False)

    async def challenge_options(self):
        return await self._get("/gamification/challenge-options", authenticated=False)

    async def reward_checkin(self, pages_read: int, minutes_spent: int):
        return await self._post(
            "/gamification/checkin",
            {"pages_read": pages_read, "minutes_spent": minutes_spent},
        )

    async def achievements(self):
        return await self._get("/gamification/achievements", authenticated=False)

    async def my_achievements(self):
        return await self._get("/gamification/achievements/me")


class LeaderboardApi(Resource):
    async def global_ranking(self, season: Optional[str] = None):
        params = {"season": season} if season else None
        return await self._get("/leaderboard", params=params, authenticated=False)

    async def my_ranking(self, season: Optional[str] = None):
        params = {"season": season} if season else None
        return await self._get("/leaderboard/me", params=params)
