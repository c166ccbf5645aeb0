"""
Review data model.

Represents a sentiment-tagged review of a movie or a product, as supplied by
the review store. The classification fields (sentiment, score, emotions,
keywords) are produced upstream by the classification agent.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

# Ordered from most negative to most positive
SENTIMENT_LABELS = (
    "strongly_negative",
    "negative",
    "slightly_negative",
    "neutral",
    "slightly_positive",
    "positive",
    "strongly_positive",
)
SENTIMENT_ORDINALS = {label: index - 3 for index, label in enumerate(SENTIMENT_LABELS)}

EMOTIONS = ("happy", "sad", "angry", "surprised", "fearful")

VOTE_UP = "up"
VOTE_DOWN = "down"
NO_VOTE = "none"
VOTE_TYPES = (VOTE_UP, VOTE_DOWN)

MOVIE = "movie"
PRODUCT = "product"
ITEM_TYPES = (MOVIE, PRODUCT)


def sentiment_ordinal(label: str) -> int:
    """Map a sentiment label to its ordinal in [-3, 3]."""
    if label not in SENTIMENT_ORDINALS:
        raise ValueError(f"Invalid sentiment: {label}")
    return SENTIMENT_ORDINALS[label]


def polarity_of(label: str) -> str:
    """Collapse a sentiment label to "positive", "negative" or "neutral"."""
    ordinal = sentiment_ordinal(label)
    if ordinal > 0:
        return "positive"
    if ordinal < 0:
        return "negative"
    return "neutral"


@dataclass(frozen=True)
class MovieItem:
    """A reviewed movie."""
    name: str
    release_date: Optional[str] = None  # YYYY-MM-DD
    poster_path: Optional[str] = None

    item_type = MOVIE

    def to_dict(self) -> dict:
        return {
            "item_type": self.item_type,
            "name": self.name,
            "release_date": self.release_date,
            "poster_path": self.poster_path
        }


@dataclass(frozen=True)
class ProductItem:
    """A reviewed product."""
    name: str
    price: Optional[float] = None
    category: Optional[str] = None
    image_url: Optional[str] = None

    item_type = PRODUCT

    def to_dict(self) -> dict:
        return {
            "item_type": self.item_type,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "image_url": self.image_url
        }


CatalogItem = Union[MovieItem, ProductItem]


def item_from_dict(item_type: str, name: str, details: Optional[dict] = None) -> CatalogItem:
    """
    Build the catalog item variant for a review.

    Args:
        item_type: "movie" or "product"
        name: Movie title or product name
        details: Optional variant-specific fields (camelCase or snake_case)

    Raises:
        ValueError: If item_type is not a known variant
    """
    details = details or {}
    if not isinstance(details, dict):
        raise ValueError(f"Invalid {item_type} details: {details!r}")
    if item_type == MOVIE:
        return MovieItem(
            name=name,
            release_date=_first(details, "release_date", "releaseDate"),
            poster_path=_first(details, "poster_path", "posterPath")
        )
    if item_type == PRODUCT:
        return ProductItem(
            name=name,
            price=_first(details, "price"),
            category=_first(details, "category"),
            image_url=_first(details, "image_url", "imageUrl")
        )
    raise ValueError(f"Invalid item type: {item_type}. Must be 'movie' or 'product'")


@dataclass
class Review:
    """
    A review snapshot.

    `votes` maps voter_id -> "up"/"down"; the counters mirror it and are only
    changed through the vote ledger.
    """
    review_id: str
    author_id: str
    author_name: str
    item: CatalogItem
    text: str
    rating: float  # 0-5 in steps of 0.5
    sentiment: str  # One of SENTIMENT_LABELS
    score: float  # Opaque engine score
    created_at: datetime  # Normalized to UTC; naive values are taken as UTC
    emotions: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    votes: Dict[str, str] = field(default_factory=dict)
    upvote_count: int = 0
    downvote_count: int = 0

    def __post_init__(self):
        if not isinstance(self.item, (MovieItem, ProductItem)):
            raise ValueError(f"Invalid item for review {self.review_id}: {self.item!r}")

        if not (0 <= self.rating <= 5) or (self.rating * 2) != int(self.rating * 2):
            raise ValueError(f"Invalid rating: {self.rating}. Must be 0-5 in steps of 0.5")

        if self.sentiment not in SENTIMENT_ORDINALS:
            raise ValueError(f"Invalid sentiment: {self.sentiment}")

        unknown = [e for e in self.emotions if e not in EMOTIONS]
        if unknown:
            raise ValueError(f"Invalid emotions: {unknown}. Must be among {EMOTIONS}")
        # Emotions form a set; keep first occurrence order
        self.emotions = list(dict.fromkeys(self.emotions))

        for voter_id, vote_type in self.votes.items():
            if vote_type not in VOTE_TYPES:
                raise ValueError(f"Invalid vote type for voter {voter_id}: {vote_type}")

        if self.upvote_count < 0 or self.downvote_count < 0:
            raise ValueError("Vote counters cannot be negative")

        if not isinstance(self.created_at, datetime):
            raise ValueError(f"Invalid created_at: {self.created_at!r}")
        self.created_at = to_utc(self.created_at)

    @property
    def item_type(self) -> str:
        return self.item.item_type

    @property
    def item_name(self) -> str:
        return self.item.name

    @property
    def sentiment_ordinal(self) -> int:
        return SENTIMENT_ORDINALS[self.sentiment]

    @classmethod
    def from_dict(cls, data: dict) -> "Review":
        """
        Create Review from a JSON document.

        Accepts both the snake_case shape written by to_dict() and the
        camelCase shape of the review store (_id, userId, type, movieName,
        upvotes, votes as a list of {userId, voteType}, ...).

        Stored counters are kept as-is; the ingestion agent reconciles them
        with the vote entries.
        """
        item_data = data.get("item")
        if isinstance(item_data, dict):
            item = item_from_dict(
                item_data.get("item_type"), item_data.get("name", ""), item_data
            )
        else:
            item_type = _first(data, "item_type", "itemType", "type")
            if item_type == MOVIE:
                name = _first(data, "item_name", "itemName", "movieName")
                details = data.get("movieDetails")
            else:
                name = _first(data, "item_name", "itemName", "productName")
                details = data.get("productDetails")
            item = item_from_dict(item_type, name or "", details)

        votes = _parse_votes(data.get("votes"))

        return cls(
            review_id=str(_first(data, "review_id", "id", "_id")),
            author_id=str(_first(data, "author_id", "authorId", "userId")),
            author_name=_first(data, "author_name", "authorName", "userName") or "",
            item=item,
            text=data.get("text", ""),
            rating=data["rating"],
            sentiment=data["sentiment"],
            score=data.get("score", 0.0),
            created_at=parse_timestamp(_first(data, "created_at", "createdAt")),
            emotions=list(data.get("emotions") or []),
            keywords=list(data.get("keywords") or []),
            votes=votes,
            upvote_count=_stored_count(data, votes, VOTE_UP, "upvote_count", "upvotes"),
            downvote_count=_stored_count(data, votes, VOTE_DOWN, "downvote_count", "downvotes")
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "review_id": self.review_id,
            "author_id": self.author_id,
            "author_name": self.author_name,
            "item": self.item.to_dict(),
            "text": self.text,
            "rating": self.rating,
            "sentiment": self.sentiment,
            "score": self.score,
            "emotions": list(self.emotions),
            "keywords": list(self.keywords),
            "votes": dict(self.votes),
            "upvote_count": self.upvote_count,
            "downvote_count": self.downvote_count,
            "created_at": self.created_at.isoformat()
        }


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value) -> datetime:
    """Parse an ISO-8601 timestamp (a trailing "Z" is accepted) into UTC."""
    if isinstance(value, datetime):
        return to_utc(value)
    if not value:
        raise ValueError("Missing created_at timestamp")
    return to_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))


def _parse_votes(raw) -> Dict[str, str]:
    """Normalize a vote mapping or a list of {userId, voteType} entries."""
    if not raw:
        return {}
    if isinstance(raw, dict):
        return {str(voter): vote for voter, vote in raw.items()}
    if not isinstance(raw, list):
        raise ValueError(f"Invalid votes: {raw!r}. Must be a mapping or a list")

    votes = {}
    for entry in raw:
        if not isinstance(entry, dict):
            raise ValueError(f"Invalid vote entry: {entry!r}")
        voter_id = _first(entry, "voter_id", "userId")
        vote_type = _first(entry, "vote_type", "voteType")
        # Last entry wins when a voter appears twice
        votes[str(voter_id)] = vote_type
    return votes


def _stored_count(data: dict, votes: Dict[str, str], vote_type: str, *keys) -> int:
    """Stored counter if the document has one, else the live count."""
    stored = _first(data, *keys)
    if stored is not None:
        return int(stored)
    return sum(1 for v in votes.values() if v == vote_type)


def _first(data: dict, *keys):
    """Return the first non-None value among keys."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None
