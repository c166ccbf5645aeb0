"""
Unit tests for the Ingestion Agent.
"""

from unittest.mock import MagicMock

import pytest

from reviewpulse.agents.classification import Classification
from reviewpulse.agents.ingestion import IngestionAgent


def make_document(review_id, **overrides):
    document = {
        "review_id": review_id,
        "author_id": "a1",
        "author_name": "Ana",
        "item_type": "movie",
        "item_name": "Alien",
        "text": "Scary and great",
        "rating": 4.5,
        "sentiment": "positive",
        "score": 2.0,
        "emotions": ["fearful"],
        "keywords": ["space"],
        "created_at": "2024-06-01T10:00:00"
    }
    document.update(overrides)
    return document


def test_ingest_labeled_documents():
    agent = IngestionAgent()

    reviews = agent.ingest([make_document("1"), make_document("2")])

    assert [r.review_id for r in reviews] == ["1", "2"]
    assert reviews[0].item_name == "Alien"
    assert agent.skipped == 0


def test_unlabeled_document_is_classified_once():
    classifier = MagicMock()
    classifier.classify.return_value = Classification(
        sentiment="negative", score=-2.0, emotions=["angry"], keywords=["ending"]
    )
    agent = IngestionAgent(classifier=classifier)

    document = make_document("1", text="Hated the ending")
    del document["sentiment"]
    reviews = agent.ingest([document, make_document("2")])

    classifier.classify.assert_called_once_with("Hated the ending")
    assert reviews[0].sentiment == "negative"
    assert reviews[0].keywords == ["ending"]
    assert reviews[1].sentiment == "positive"
    # Source document is left untouched
    assert "sentiment" not in document


def test_unlabeled_document_without_classifier_is_skipped():
    agent = IngestionAgent()
    document = make_document("1")
    del document["sentiment"]

    assert agent.ingest([document]) == []
    assert agent.skipped == 1


def test_malformed_documents_are_skipped():
    agent = IngestionAgent()

    reviews = agent.ingest([
        make_document("1", rating=9),
        make_document("2", item_type="book"),
        make_document("3", created_at=None),
        None,
        "junk",
        make_document("5", votes=["u1"]),
        make_document("6", votes="u1"),
        make_document("4"),
    ])

    assert [r.review_id for r in reviews] == ["4"]
    assert agent.skipped == 7


def test_drifted_counters_are_recounted():
    agent = IngestionAgent()
    document = make_document(
        "1",
        votes={"u1": "up", "u2": "down"},
        upvote_count=5,
        downvote_count=0
    )

    review = agent.ingest([document])[0]

    assert (review.upvote_count, review.downvote_count) == (1, 1)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
