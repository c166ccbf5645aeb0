"""
Recommendation data models.

Groups of reviews that share traits, and the bundle shown on the
recommendations page.
"""

from dataclasses import dataclass, field
from typing import List

from reviewpulse.models.review import Review


@dataclass
class RecommendationGroup:
    """
    A primary review plus the reviews that share at least one trait with it.
    """
    primary: Review
    similar: List[Review] = field(default_factory=list)
    common_traits: List[str] = field(default_factory=list)

    @property
    def member_ids(self) -> List[str]:
        """Primary id first, then the similar reviews in order."""
        return [self.primary.review_id] + [r.review_id for r in self.similar]

    def to_dict(self) -> dict:
        return {
            "primary": self.primary.to_dict(),
            "similar": [review.to_dict() for review in self.similar],
            "common_traits": list(self.common_traits)
        }


@dataclass
class Recommendations:
    movies: List[RecommendationGroup] = field(default_factory=list)
    products: List[RecommendationGroup] = field(default_factory=list)
    trending: List[Review] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "movies": [group.to_dict() for group in self.movies],
            "products": [group.to_dict() for group in self.products],
            "trending": [review.to_dict() for review in self.trending]
        }
