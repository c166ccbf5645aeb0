"""
Review scoping and search filters.

Narrows a review collection before it is handed to the aggregator or the
grouper: one item, one author, or the search view's filter set.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from reviewpulse.models.review import ITEM_TYPES, SENTIMENT_LABELS, Review, to_utc

ALL = "all"


@dataclass(frozen=True)
class ReviewFilter:
    """
    Search view filters. Unset filters match everything.
    """
    query: str = ""  # Matched against text and keywords, case-insensitive
    category: str = ALL  # "all", "movie" or "product"
    sentiment: str = ALL  # "all" or a sentiment label
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    score_range: Optional[Tuple[float, float]] = None  # Inclusive
    emotions: Tuple[str, ...] = field(default_factory=tuple)  # Any-of

    def __post_init__(self):
        if self.category != ALL and self.category not in ITEM_TYPES:
            raise ValueError(f"Invalid category: {self.category}")
        if self.sentiment != ALL and self.sentiment not in SENTIMENT_LABELS:
            raise ValueError(f"Invalid sentiment: {self.sentiment}")
        # Compared against Review.created_at, which is always UTC
        for name in ("start", "end"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, to_utc(value))

    @property
    def is_active(self) -> bool:
        """True if any filter would narrow the results."""
        return bool(
            self.query
            or self.category != ALL
            or self.sentiment != ALL
            or (self.start and self.end)
            or self.score_range
            or self.emotions
        )

    def matches(self, review: Review) -> bool:
        if self.query:
            needle = self.query.lower()
            if needle not in review.text.lower() and not any(
                needle in keyword.lower() for keyword in review.keywords
            ):
                return False

        if self.category != ALL and review.item_type != self.category:
            return False

        if self.sentiment != ALL and review.sentiment != self.sentiment:
            return False

        # Date range applies only when both ends are set
        if self.start and self.end and not (self.start <= review.created_at <= self.end):
            return False

        if self.score_range:
            low, high = self.score_range
            if not (low <= review.score <= high):
                return False

        if self.emotions and not any(e in review.emotions for e in self.emotions):
            return False

        return True

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "category": self.category,
            "sentiment": self.sentiment,
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
            "score_range": list(self.score_range) if self.score_range else None,
            "emotions": list(self.emotions)
        }


def apply_filters(reviews: Iterable[Review], review_filter: ReviewFilter) -> List[Review]:
    """Reviews matching every active filter, input order kept."""
    return [review for review in reviews if review_filter.matches(review)]


def for_item(reviews: Iterable[Review], item_type: str, item_name: str) -> List[Review]:
    """Reviews of a single movie or product."""
    return [
        review for review in reviews
        if review.item_type == item_type and review.item_name == item_name
    ]


def by_author(reviews: Iterable[Review], author_id: str) -> List[Review]:
    """Reviews written by a single user."""
    return [review for review in reviews if review.author_id == author_id]
