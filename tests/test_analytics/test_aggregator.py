"""
Unit tests for the Analytics Aggregator.
"""

import json
from datetime import date, datetime, timezone

import pytest

from reviewpulse.analytics.aggregator import (
    average_score,
    build_dashboard,
    category_comparison,
    emotion_frequency,
    keyword_dataframe,
    keyword_frequency,
    reviews_over_time,
    sentiment_distribution,
    summarize,
    time_trend,
    top_emotions,
    trend_dataframe,
)
from reviewpulse.models.analytics import KeywordCount
from reviewpulse.models.review import MovieItem, ProductItem, Review


def make_review(review_id, sentiment="neutral", rating=3.0, created_at=None,
                emotions=None, keywords=None, item=None, score=0.0):
    return Review(
        review_id=review_id,
        author_id="a1",
        author_name="Ana",
        item=item or MovieItem(name="Inception"),
        text="text",
        rating=rating,
        sentiment=sentiment,
        score=score,
        created_at=created_at or datetime(2024, 6, 1),
        emotions=emotions or [],
        keywords=keywords or []
    )


def test_sentiment_distribution_omits_absent_labels():
    reviews = [
        make_review("1", "positive"),
        make_review("2", "positive"),
        make_review("3", "negative"),
    ]

    distribution = sentiment_distribution(reviews)

    assert distribution == {"positive": 2, "negative": 1}
    assert sum(distribution.values()) == len(reviews)
    assert sentiment_distribution([]) == {}


def test_emotion_frequency_counts_every_emotion():
    reviews = [
        make_review("1", emotions=["happy", "surprised"]),
        make_review("2", emotions=["happy"]),
        make_review("3"),
    ]

    assert emotion_frequency(reviews) == {
        "happy": 2, "sad": 0, "angry": 0, "surprised": 1, "fearful": 0
    }
    assert emotion_frequency([]) == {
        "happy": 0, "sad": 0, "angry": 0, "surprised": 0, "fearful": 0
    }


def test_time_trend_sorted_and_stable():
    reviews = [
        make_review("late", "positive", 5, datetime(2024, 6, 3)),
        make_review("tie-a", "negative", 1, datetime(2024, 6, 1)),
        make_review("tie-b", "neutral", 3, datetime(2024, 6, 1)),
    ]

    trend = time_trend(reviews)

    assert [(p.date, p.sentiment, p.rating) for p in trend] == [
        (datetime(2024, 6, 1, tzinfo=timezone.utc), -2, 1),
        (datetime(2024, 6, 1, tzinfo=timezone.utc), 0, 3),
        (datetime(2024, 6, 3, tzinfo=timezone.utc), 2, 5),
    ]
    # Restartable: a second call gives the same sequence
    assert time_trend(reviews) == trend
    assert time_trend([]) == []


def test_mixed_naive_and_aware_timestamps():
    """Naive timestamps are taken as UTC, so they order against aware ones."""
    documents = [
        {"_id": "z", "userId": "u1", "type": "movie", "movieName": "Alien",
         "rating": 4, "sentiment": "positive", "createdAt": "2024-06-02T10:00:00Z"},
        {"_id": "naive", "userId": "u2", "type": "movie", "movieName": "Alien",
         "rating": 2, "sentiment": "negative", "createdAt": "2024-06-01T10:00:00"},
        {"_id": "offset", "userId": "u3", "type": "movie", "movieName": "Alien",
         "rating": 3, "sentiment": "neutral", "createdAt": "2024-06-02T11:30:00+02:00"},
    ]
    reviews = [Review.from_dict(document) for document in documents]
    reviews.append(make_review("direct", "strongly_positive", 5, datetime(2024, 6, 3)))

    trend = time_trend(reviews)

    assert [p.sentiment for p in trend] == [-2, 0, 2, 3]
    assert trend[1].date == datetime(2024, 6, 2, 9, 30, tzinfo=timezone.utc)

    report = build_dashboard(reviews)
    assert report.summary.count == 4


def test_keyword_frequency_top_n():
    reviews = [
        make_review("a", keywords=["fun", "great"]),
        make_review("b", keywords=["fun"]),
    ]

    assert keyword_frequency(reviews, top_n=1) == [KeywordCount("fun", 2)]


def test_keyword_frequency_ties_by_first_seen():
    reviews = [
        make_review("a", keywords=["plot", "cast"]),
        make_review("b", keywords=["music", "cast", "plot"]),
        make_review("c", keywords=["music"]),
    ]

    result = keyword_frequency(reviews)

    assert [(k.keyword, k.count) for k in result] == [("plot", 2), ("cast", 2), ("music", 2)]


def test_keyword_frequency_bounds():
    reviews = [make_review("a", keywords=["x", "y", "z"])]

    assert len(keyword_frequency(reviews, top_n=10)) == 3
    assert keyword_frequency(reviews, top_n=0) == []
    assert keyword_frequency([], top_n=5) == []


def test_category_comparison():
    reviews = [
        make_review("1"),
        make_review("2", item=ProductItem(name="Kettle")),
        make_review("3", item=ProductItem(name="Lamp")),
    ]

    counts = category_comparison(reviews)
    assert (counts.movies, counts.products, counts.total) == (1, 2, 3)


def test_summarize():
    reviews = [
        make_review("1", "positive", 4),
        make_review("2", "positive", 5),
        make_review("3", "negative", 1.5),
    ]

    summary = summarize(reviews)

    assert summary.count == 3
    assert summary.average_rating == pytest.approx(3.5)
    assert summary.dominant_sentiment == "positive"
    assert summary.polarity == "positive"


def test_summarize_tie_goes_to_first_seen():
    reviews = [
        make_review("1", "slightly_negative"),
        make_review("2", "neutral"),
        make_review("3", "neutral"),
        make_review("4", "slightly_negative"),
    ]

    summary = summarize(reviews)
    assert summary.dominant_sentiment == "slightly_negative"
    assert summary.polarity == "negative"


def test_summarize_empty_scope():
    summary = summarize([])

    assert summary.count == 0
    assert summary.average_rating is None
    assert summary.dominant_sentiment is None
    assert summary.polarity is None
    assert not summary.has_data


def test_reviews_over_time_groups_by_day():
    reviews = [
        make_review("1", created_at=datetime(2024, 6, 2, 18)),
        make_review("2", created_at=datetime(2024, 6, 1, 9)),
        make_review("3", created_at=datetime(2024, 6, 2, 7)),
    ]

    assert [(d.date, d.count) for d in reviews_over_time(reviews)] == [
        (date(2024, 6, 1), 1),
        (date(2024, 6, 2), 2),
    ]


def test_top_emotions_and_average_score():
    reviews = [
        make_review("1", emotions=["sad"], score=-2.0),
        make_review("2", emotions=["happy", "sad"], score=1.0),
    ]

    assert top_emotions(reviews) == [("sad", 2), ("happy", 1)]
    assert average_score(reviews) == pytest.approx(-0.5)
    assert average_score([]) is None


def test_build_dashboard_is_json_serializable():
    reviews = [
        make_review("1", "positive", 4, emotions=["happy"], keywords=["fun"]),
        make_review("2", "negative", 2, datetime(2024, 6, 2), keywords=["fun", "long"]),
    ]

    report = build_dashboard(reviews, top_n=1)
    data = json.loads(json.dumps(report.to_dict()))

    assert data["summary"]["count"] == 2
    assert data["top_keywords"] == [{"keyword": "fun", "count": 2}]
    assert data["category_comparison"] == {"movies": 2, "products": 0}
    assert len(data["time_trend"]) == 2


def test_build_dashboard_empty_scope():
    report = build_dashboard([])

    assert report.summary.count == 0
    assert report.sentiment_distribution == {}
    assert report.time_trend == []
    assert report.top_keywords == []
    assert report.average_score is None


def test_dataframes():
    reviews = [make_review("1", "positive", 4, keywords=["fun", "cast"])]

    trend_df = trend_dataframe(time_trend(reviews))
    assert list(trend_df.columns) == ["date", "sentiment", "rating"]
    assert trend_df.iloc[0]["sentiment"] == 2

    keyword_df = keyword_dataframe(keyword_frequency(reviews))
    assert list(keyword_df.columns) == ["rank", "keyword", "count"]
    assert list(keyword_df["rank"]) == [1, 2]

    assert trend_dataframe([]).empty
    assert keyword_dataframe([]).empty


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
