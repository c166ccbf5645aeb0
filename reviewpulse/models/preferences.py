"""
User preferences data model.

Saved reviews, followed users, search history and saved searches for one
user. The value is owned by the presentation layer and passed explicitly;
every operation returns a new value.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Tuple

DEFAULT_HISTORY_LIMIT = 10


@dataclass(frozen=True)
class SearchEntry:
    """A search as issued from the search view."""
    query: str
    filters: dict = field(default_factory=dict)
    timestamp: Optional[datetime] = None
    name: Optional[str] = None  # Set when the search is saved

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "filters": dict(self.filters),
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "name": self.name
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SearchEntry":
        timestamp = data.get("timestamp")
        return cls(
            query=data.get("query", ""),
            filters=data.get("filters", {}),
            timestamp=datetime.fromisoformat(timestamp) if timestamp else None,
            name=data.get("name")
        )


@dataclass(frozen=True)
class UserPreferences:
    user_id: str
    saved_review_ids: Tuple[str, ...] = ()
    followed_user_ids: Tuple[str, ...] = ()
    search_history: Tuple[SearchEntry, ...] = ()  # Newest first
    saved_searches: Tuple[SearchEntry, ...] = ()

    def is_saved(self, review_id: str) -> bool:
        return review_id in self.saved_review_ids

    def is_following(self, user_id: str) -> bool:
        return user_id in self.followed_user_ids

    def toggle_saved(self, review_id: str) -> "UserPreferences":
        """Save the review, or unsave it if already saved."""
        return replace(self, saved_review_ids=_toggle(self.saved_review_ids, review_id))

    def toggle_follow(self, user_id: str) -> "UserPreferences":
        """Follow the user, or unfollow if already followed."""
        if user_id == self.user_id:
            raise ValueError("Users cannot follow themselves")
        return replace(self, followed_user_ids=_toggle(self.followed_user_ids, user_id))

    def record_search(
        self,
        entry: SearchEntry,
        limit: int = DEFAULT_HISTORY_LIMIT
    ) -> "UserPreferences":
        """
        Prepend a search to the history, keeping at most `limit` entries.

        Args:
            entry: Search to record
            limit: Maximum history length (oldest entries are dropped)
        """
        history = (entry,) + self.search_history
        return replace(self, search_history=history[:limit])

    def save_search(self, entry: SearchEntry) -> "UserPreferences":
        """Keep a search permanently; unnamed searches get "Search <n>"."""
        if not entry.name:
            entry = replace(entry, name=f"Search {len(self.saved_searches) + 1}")
        return replace(self, saved_searches=self.saved_searches + (entry,))

    def remove_saved_search(self, name: str) -> "UserPreferences":
        remaining = tuple(s for s in self.saved_searches if s.name != name)
        return replace(self, saved_searches=remaining)

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "saved_review_ids": list(self.saved_review_ids),
            "followed_user_ids": list(self.followed_user_ids),
            "search_history": [entry.to_dict() for entry in self.search_history],
            "saved_searches": [entry.to_dict() for entry in self.saved_searches]
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserPreferences":
        return cls(
            user_id=data["user_id"],
            saved_review_ids=tuple(data.get("saved_review_ids", [])),
            followed_user_ids=tuple(data.get("followed_user_ids", [])),
            search_history=tuple(
                SearchEntry.from_dict(e) for e in data.get("search_history", [])
            ),
            saved_searches=tuple(
                SearchEntry.from_dict(e) for e in data.get("saved_searches", [])
            )
        )


def _toggle(values: Tuple[str, ...], value: str) -> Tuple[str, ...]:
    if value in values:
        return tuple(v for v in values if v != value)
    return values + (value,)
