"""
Vote Ledger - Per-review vote state with toggle/switch semantics.

Keeps at most one vote per voter on a review and keeps the up/down counters
equal to the live vote entries.
"""

import logging
import threading
from typing import Dict

from reviewpulse.models.review import Review, VOTE_TYPES, VOTE_UP, VOTE_DOWN, NO_VOTE
from reviewpulse.models.vote import VoteResult, RECORDED, RETRACTED, SWITCHED

logger = logging.getLogger(__name__)


class InvalidArgumentError(ValueError):
    """Raised for a malformed vote request (unknown vote type, missing voter)."""


class VoteLedger:
    """
    Applies votes to review snapshots.

    Casts on the same review are serialized through a per-review lock;
    casts on different reviews do not contend.
    """

    def __init__(self):
        self._locks: Dict[str, threading.Lock] = {}  # review_id -> lock
        self._locks_guard = threading.Lock()

    def _lock_for(self, review_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(review_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[review_id] = lock
            return lock

    def forget(self, review_id: str) -> None:
        """Drop the lock of a review deleted from the store."""
        with self._locks_guard:
            self._locks.pop(review_id, None)

    def cast_vote(self, review: Review, voter_id: str, vote_type: str) -> VoteResult:
        """
        Cast, retract or switch a voter's vote on a review.

        - No existing vote: the vote is recorded.
        - Same vote again: the vote is retracted (toggle-off).
        - Opposite vote: the vote is switched; the total is unchanged.

        Only review.votes, review.upvote_count and review.downvote_count
        are modified.

        Args:
            review: Review snapshot to update in place
            voter_id: Identity of the voter (trusted, already authenticated)
            vote_type: "up" or "down"

        Returns:
            VoteResult with the voter's resulting vote and the new counters

        Raises:
            InvalidArgumentError: If vote_type is not "up"/"down" or voter_id is empty
        """
        if vote_type not in VOTE_TYPES:
            raise InvalidArgumentError(
                f"Invalid vote type: {vote_type!r}. Must be 'up' or 'down'"
            )
        if not voter_id:
            raise InvalidArgumentError("Missing voter id")

        with self._lock_for(review.review_id):
            # Counters built outside ingestion may disagree with the entries
            recount(review)
            existing = review.votes.get(voter_id)

            if existing is None:
                review.votes[voter_id] = vote_type
                _adjust(review, vote_type, +1)
                action = RECORDED
            elif existing == vote_type:
                del review.votes[voter_id]
                _adjust(review, vote_type, -1)
                action = RETRACTED
            else:
                review.votes[voter_id] = vote_type
                _adjust(review, existing, -1)
                _adjust(review, vote_type, +1)
                action = SWITCHED

            result = VoteResult(
                review_id=review.review_id,
                voter_id=voter_id,
                vote=review.votes.get(voter_id, NO_VOTE),
                action=action,
                upvote_count=review.upvote_count,
                downvote_count=review.downvote_count
            )

        logger.debug(
            f"Vote {action} on {review.review_id} by {voter_id}: "
            f"up={result.upvote_count}, down={result.downvote_count}"
        )
        return result

    def get_vote(self, review: Review, voter_id: str) -> str:
        """
        Look up a voter's current vote on a review.

        Args:
            review: Review snapshot to read
            voter_id: Identity of the voter

        Returns:
            "up", "down" or "none" if the voter has not voted
        """
        return get_vote(review, voter_id)


def get_vote(review: Review, voter_id: str) -> str:
    """Return the voter's current vote on the review: "up", "down" or "none"."""
    return review.votes.get(voter_id, NO_VOTE)


def is_consistent(review: Review) -> bool:
    """Check that the counters match the live vote entries."""
    ups = sum(1 for v in review.votes.values() if v == VOTE_UP)
    downs = sum(1 for v in review.votes.values() if v == VOTE_DOWN)
    return (
        ups == review.upvote_count
        and downs == review.downvote_count
        and ups + downs == len(review.votes)
    )


def recount(review: Review) -> bool:
    """
    Rebuild the counters from the vote entries.

    Returns:
        True if the counters had drifted and were corrected
    """
    ups = sum(1 for v in review.votes.values() if v == VOTE_UP)
    downs = sum(1 for v in review.votes.values() if v == VOTE_DOWN)
    drifted = (ups, downs) != (review.upvote_count, review.downvote_count)
    if drifted:
        logger.warning(
            f"Vote counters out of sync on {review.review_id} "
            f"(up={review.upvote_count}/{ups}, down={review.downvote_count}/{downs}), recounting"
        )
        review.upvote_count = ups
        review.downvote_count = downs
    return drifted


def _adjust(review: Review, vote_type: str, delta: int) -> None:
    if vote_type == VOTE_UP:
        review.upvote_count += delta
    else:
        review.downvote_count += delta
