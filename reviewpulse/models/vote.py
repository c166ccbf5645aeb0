"""
Vote result data model.

Returned by the vote ledger after every cast so callers can persist the
updated vote sub-state of a review.
"""

from dataclasses import dataclass

RECORDED = "recorded"
RETRACTED = "retracted"
SWITCHED = "switched"


@dataclass(frozen=True)
class VoteResult:
    review_id: str
    voter_id: str
    vote: str  # "up", "down" or "none"
    action: str  # "recorded", "retracted" or "switched"
    upvote_count: int
    downvote_count: int

    @property
    def total_votes(self) -> int:
        return self.upvote_count + self.downvote_count

    def to_dict(self) -> dict:
        return {
            "review_id": self.review_id,
            "voter_id": self.voter_id,
            "vote": self.vote,
            "action": self.action,
            "upvote_count": self.upvote_count,
            "downvote_count": self.downvote_count
        }
