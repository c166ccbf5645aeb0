"""
Sentiment/Emotion Analytics Aggregator.

Pure functions turning a caller-scoped collection of reviews into
distributions, trends and keyword frequencies for the dashboard views.
"""

import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from reviewpulse.models.analytics import (
    CategoryCounts,
    DashboardReport,
    DateCount,
    KeywordCount,
    ReviewSummary,
    TrendPoint,
)
from reviewpulse.models.review import EMOTIONS, MovieItem, ProductItem, Review, polarity_of

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 10


def sentiment_distribution(reviews: Sequence[Review]) -> Dict[str, int]:
    """
    Count reviews per sentiment label.

    Only labels that occur are present, in first-seen order.
    """
    return dict(Counter(review.sentiment for review in reviews))


def emotion_frequency(reviews: Sequence[Review]) -> Dict[str, int]:
    """
    Count reviews carrying each of the five emotions.

    Every emotion is present (zero if unused). A review can count toward
    several emotions.
    """
    counts = {emotion: 0 for emotion in EMOTIONS}
    for review in reviews:
        for emotion in set(review.emotions):
            counts[emotion] += 1
    return counts


def time_trend(reviews: Sequence[Review]) -> List[TrendPoint]:
    """
    Project reviews onto (date, sentiment ordinal, rating), oldest first.

    The sort is stable: reviews created at the same instant keep their
    input order.
    """
    ordered = sorted(reviews, key=lambda review: review.created_at)
    return [
        TrendPoint(
            date=review.created_at,
            sentiment=review.sentiment_ordinal,
            rating=review.rating
        )
        for review in ordered
    ]


def keyword_frequency(reviews: Sequence[Review], top_n: int = DEFAULT_TOP_N) -> List[KeywordCount]:
    """
    Most frequent keywords across all reviews.

    Args:
        reviews: Reviews in scope
        top_n: Maximum number of keywords to return

    Returns:
        KeywordCount list, count descending; equal counts keep the order in
        which the keywords were first seen
    """
    if top_n <= 0:
        return []

    counts = Counter()
    for review in reviews:
        counts.update(review.keywords)

    # most_common() is stable for equal counts (insertion order)
    return [KeywordCount(keyword, count) for keyword, count in counts.most_common(top_n)]


def category_comparison(reviews: Sequence[Review]) -> CategoryCounts:
    """Count movie reviews vs product reviews."""
    movies = 0
    products = 0
    for review in reviews:
        if isinstance(review.item, MovieItem):
            movies += 1
        elif isinstance(review.item, ProductItem):
            products += 1
        else:
            raise TypeError(f"Unhandled item variant: {type(review.item).__name__}")
    return CategoryCounts(movies=movies, products=products)


def summarize(reviews: Sequence[Review]) -> ReviewSummary:
    """
    Headline statistics: count, mean rating, dominant sentiment, polarity.

    The dominant sentiment is the most frequent label; ties go to the label
    seen first. An empty scope yields ReviewSummary.empty().
    """
    if not reviews:
        return ReviewSummary.empty()

    average_rating = sum(review.rating for review in reviews) / len(reviews)
    dominant, _ = Counter(review.sentiment for review in reviews).most_common(1)[0]

    return ReviewSummary(
        count=len(reviews),
        average_rating=average_rating,
        dominant_sentiment=dominant,
        polarity=polarity_of(dominant)
    )


def reviews_over_time(reviews: Sequence[Review]) -> List[DateCount]:
    """Number of reviews per calendar day, oldest day first."""
    per_day = Counter(review.created_at.date() for review in reviews)
    return [DateCount(day, count) for day, count in sorted(per_day.items())]


def top_emotions(reviews: Sequence[Review], limit: int = 5) -> List[Tuple[str, int]]:
    """
    Emotions that occur, most frequent first (ties in first-seen order).
    """
    if limit <= 0:
        return []
    counts = Counter()
    for review in reviews:
        counts.update(review.emotions)
    return counts.most_common(limit)


def average_score(reviews: Sequence[Review]) -> Optional[float]:
    """Mean engine score, or None for an empty scope."""
    if not reviews:
        return None
    return sum(review.score for review in reviews) / len(reviews)


def build_dashboard(
    reviews: Sequence[Review],
    top_n: int = DEFAULT_TOP_N,
    emotions_limit: int = 5
) -> DashboardReport:
    """
    Compute every dashboard aggregate for a review scope.

    Args:
        reviews: Reviews in scope (already filtered by the caller)
        top_n: Number of top keywords
        emotions_limit: Number of top emotions

    Returns:
        DashboardReport (well-formed and zeroed for an empty scope)
    """
    reviews = list(reviews)
    if not reviews:
        logger.info("Empty review scope, dashboard will be zeroed")

    report = DashboardReport(
        summary=summarize(reviews),
        sentiment_distribution=sentiment_distribution(reviews),
        emotion_frequency=emotion_frequency(reviews),
        time_trend=time_trend(reviews),
        reviews_over_time=reviews_over_time(reviews),
        category_comparison=category_comparison(reviews),
        top_keywords=keyword_frequency(reviews, top_n),
        top_emotions=top_emotions(reviews, emotions_limit),
        average_score=average_score(reviews)
    )

    logger.info(
        f"Built dashboard for {len(reviews)} reviews "
        f"({len(report.sentiment_distribution)} sentiments, "
        f"{len(report.top_keywords)} top keywords)"
    )
    return report


def trend_dataframe(points: Sequence[TrendPoint]) -> pd.DataFrame:
    """Tabulate trend points as a DataFrame with date, sentiment and rating columns."""
    if not points:
        return pd.DataFrame(columns=["date", "sentiment", "rating"])
    return pd.DataFrame(
        [{"date": p.date, "sentiment": p.sentiment, "rating": p.rating} for p in points]
    )


def keyword_dataframe(keywords: Sequence[KeywordCount]) -> pd.DataFrame:
    """Tabulate keyword counts, ranked from 1."""
    df = pd.DataFrame(
        [entry.to_dict() for entry in keywords],
        columns=["keyword", "count"]
    )
    df.insert(0, "rank", range(1, len(df) + 1))
    return df
