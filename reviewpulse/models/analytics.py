"""
Analytics data models.

Plain result structures returned by the analytics aggregator to the
presentation layer.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class TrendPoint:
    """One review projected onto the sentiment trend line."""
    date: datetime  # Review created_at
    sentiment: int  # Sentiment ordinal in [-3, 3]
    rating: float

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "sentiment": self.sentiment,
            "rating": self.rating
        }


@dataclass(frozen=True)
class KeywordCount:
    keyword: str
    count: int

    def to_dict(self) -> dict:
        return {"keyword": self.keyword, "count": self.count}


@dataclass(frozen=True)
class DateCount:
    """Number of reviews created on one calendar day."""
    date: date
    count: int

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "count": self.count}


@dataclass(frozen=True)
class CategoryCounts:
    movies: int = 0
    products: int = 0

    @property
    def total(self) -> int:
        return self.movies + self.products

    def to_dict(self) -> dict:
        return {"movies": self.movies, "products": self.products}


@dataclass(frozen=True)
class ReviewSummary:
    """
    Headline statistics for a review scope.

    An empty scope yields count=0 and None for the rating, dominant
    sentiment and polarity.
    """
    count: int
    average_rating: Optional[float] = None
    dominant_sentiment: Optional[str] = None
    polarity: Optional[str] = None  # "positive", "negative" or "neutral"

    @property
    def has_data(self) -> bool:
        return self.count > 0

    @classmethod
    def empty(cls) -> "ReviewSummary":
        return cls(count=0)

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "average_rating": self.average_rating,
            "dominant_sentiment": self.dominant_sentiment,
            "polarity": self.polarity
        }


@dataclass
class DashboardReport:
    """All aggregator outputs for one review scope, as rendered by the dashboard."""
    summary: ReviewSummary
    sentiment_distribution: Dict[str, int] = field(default_factory=dict)
    emotion_frequency: Dict[str, int] = field(default_factory=dict)
    time_trend: List[TrendPoint] = field(default_factory=list)
    reviews_over_time: List[DateCount] = field(default_factory=list)
    category_comparison: CategoryCounts = field(default_factory=CategoryCounts)
    top_keywords: List[KeywordCount] = field(default_factory=list)
    top_emotions: List[Tuple[str, int]] = field(default_factory=list)
    average_score: Optional[float] = None

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "summary": self.summary.to_dict(),
            "sentiment_distribution": dict(self.sentiment_distribution),
            "emotion_frequency": dict(self.emotion_frequency),
            "time_trend": [point.to_dict() for point in self.time_trend],
            "reviews_over_time": [entry.to_dict() for entry in self.reviews_over_time],
            "category_comparison": self.category_comparison.to_dict(),
            "top_keywords": [entry.to_dict() for entry in self.top_keywords],
            "top_emotions": [
                {"emotion": emotion, "count": count}
                for emotion, count in self.top_emotions
            ],
            "average_score": self.average_score
        }
