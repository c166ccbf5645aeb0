"""
Unit tests for the Vote Ledger.
Covers record/retract/switch semantics and counter consistency.
"""

import threading
from datetime import datetime

import pytest

from reviewpulse.ledger.vote_ledger import (
    InvalidArgumentError,
    VoteLedger,
    get_vote,
    is_consistent,
    recount,
)
from reviewpulse.models.review import MovieItem, Review


def make_review(review_id="r1"):
    return Review(
        review_id=review_id,
        author_id="author-1",
        author_name="Ana",
        item=MovieItem(name="Inception"),
        text="Loved it",
        rating=4.5,
        sentiment="positive",
        score=3.0,
        created_at=datetime(2024, 6, 1, 12, 0)
    )


@pytest.fixture
def ledger():
    return VoteLedger()


def test_upvote_then_repeat_retracts(ledger):
    """Same vote twice toggles the vote off."""
    review = make_review()

    result = ledger.cast_vote(review, "u1", "up")
    assert result.action == "recorded"
    assert result.vote == "up"
    assert review.votes == {"u1": "up"}
    assert (review.upvote_count, review.downvote_count) == (1, 0)

    result = ledger.cast_vote(review, "u1", "up")
    assert result.action == "retracted"
    assert result.vote == "none"
    assert review.votes == {}
    assert (review.upvote_count, review.downvote_count) == (0, 0)
    assert is_consistent(review)


def test_down_then_up_switches(ledger):
    """Opposite vote switches without changing the total."""
    review = make_review()

    ledger.cast_vote(review, "u1", "down")
    assert review.downvote_count == 1

    result = ledger.cast_vote(review, "u1", "up")
    assert result.action == "switched"
    assert review.votes == {"u1": "up"}
    assert (review.upvote_count, review.downvote_count) == (1, 0)
    assert result.total_votes == 1
    assert is_consistent(review)


def test_multiple_voters(ledger):
    review = make_review()

    ledger.cast_vote(review, "u1", "up")
    ledger.cast_vote(review, "u2", "up")
    ledger.cast_vote(review, "u3", "down")
    ledger.cast_vote(review, "u2", "down")

    assert review.votes == {"u1": "up", "u2": "down", "u3": "down"}
    assert (review.upvote_count, review.downvote_count) == (1, 2)
    assert is_consistent(review)


def test_only_vote_fields_change(ledger):
    review = make_review()
    before = review.to_dict()

    ledger.cast_vote(review, "u1", "down")
    after = review.to_dict()

    for key in ("votes", "upvote_count", "downvote_count"):
        after.pop(key)
        before.pop(key)
    assert after == before


@pytest.mark.parametrize("vote_type", ["sideways", "", None, "UP"])
def test_invalid_vote_type_rejected(ledger, vote_type):
    review = make_review()

    with pytest.raises(InvalidArgumentError):
        ledger.cast_vote(review, "u1", vote_type)

    assert review.votes == {}
    assert (review.upvote_count, review.downvote_count) == (0, 0)


def test_invalid_argument_is_value_error(ledger):
    with pytest.raises(ValueError):
        ledger.cast_vote(make_review(), "", "up")


def test_get_vote(ledger):
    review = make_review()
    assert get_vote(review, "u1") == "none"

    ledger.cast_vote(review, "u1", "down")
    assert ledger.get_vote(review, "u1") == "down"
    assert ledger.get_vote(review, "u2") == "none"
    # Query has no side effects
    assert review.votes == {"u1": "down"}


def test_recount_repairs_drift():
    review = make_review()
    review.votes = {"u1": "up", "u2": "down", "u3": "up"}
    review.upvote_count = 7

    assert not is_consistent(review)
    assert recount(review) is True
    assert (review.upvote_count, review.downvote_count) == (2, 1)
    assert recount(review) is False


def test_cast_on_inconsistent_review_never_goes_negative(ledger):
    """A review built with counters that disagree with its votes is reconciled first."""
    review = make_review()
    review.votes = {"u1": "up"}
    review.upvote_count = 0

    result = ledger.cast_vote(review, "u1", "up")

    assert result.action == "retracted"
    assert (review.upvote_count, review.downvote_count) == (0, 0)
    assert is_consistent(review)


def test_concurrent_votes_on_same_review(ledger):
    """Parallel casts by distinct voters lose no increments."""
    review = make_review()
    barrier = threading.Barrier(8)

    def vote(worker):
        barrier.wait()
        for i in range(50):
            ledger.cast_vote(review, f"w{worker}-{i}", "up" if i % 2 else "down")

    threads = [threading.Thread(target=vote, args=(w,)) for w in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(review.votes) == 400
    assert (review.upvote_count, review.downvote_count) == (200, 200)
    assert is_consistent(review)


def test_concurrent_toggles_keep_invariant(ledger):
    """Repeated toggles by the same voter from many threads stay consistent."""
    review = make_review()

    def toggle():
        for _ in range(100):
            ledger.cast_vote(review, "u1", "up")

    threads = [threading.Thread(target=toggle) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    # 400 toggles is even, so the vote ends retracted
    assert review.votes == {}
    assert review.upvote_count == 0
    assert is_consistent(review)


def test_forget_drops_lock(ledger):
    review = make_review("gone")
    ledger.cast_vote(review, "u1", "up")
    ledger.forget("gone")
    ledger.forget("never-seen")

    # Voting again recreates the lock
    ledger.cast_vote(review, "u1", "up")
    assert review.votes == {}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
