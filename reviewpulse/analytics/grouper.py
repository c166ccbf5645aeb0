"""
Similarity-Based Recommendation Grouper.

Clusters positive reviews that share keywords or emotions, to build
"recommended because similar to X" lists.
"""

import logging
from typing import Iterable, List, Sequence

from reviewpulse.models.recommendation import RecommendationGroup, Recommendations
from reviewpulse.models.review import ITEM_TYPES, MOVIE, PRODUCT, Review

logger = logging.getLogger(__name__)

POSITIVE_SENTIMENTS = ("positive", "strongly_positive")


def shared_traits(primary: Review, other: Review) -> List[str]:
    """Keywords then emotions of `other` that `primary` also has."""
    traits = [keyword for keyword in other.keywords if keyword in primary.keywords]
    traits += [emotion for emotion in other.emotions if emotion in primary.emotions]
    return traits


def group_similar_reviews(reviews: Sequence[Review]) -> List[RecommendationGroup]:
    """
    Greedily group reviews that share at least one trait.

    Single pass in input order. Each unassigned review collects every other
    unassigned review it shares a keyword or an emotion with; if it finds
    any, it becomes the primary of a new group and all members are marked
    assigned. A review that matches nothing produces no group, but stays
    available as a match for later primaries.

    Args:
        reviews: Reviews already narrowed to one item type and positive sentiment

    Returns:
        Groups in the order their primaries appear; no review is in two groups
    """
    groups = []
    assigned = set()  # Input positions

    for index, review in enumerate(reviews):
        if index in assigned:
            continue

        matches = []
        common_traits = {}  # Ordered set
        for other_index, other in enumerate(reviews):
            if other_index == index or other_index in assigned:
                continue
            traits = shared_traits(review, other)
            if traits:
                matches.append(other_index)
                common_traits.update(dict.fromkeys(traits))

        if not matches:
            logger.debug(f"No similar reviews for {review.review_id}, skipping")
            continue

        groups.append(RecommendationGroup(
            primary=review,
            similar=[reviews[i] for i in matches],
            common_traits=list(common_traits)
        ))
        assigned.add(index)
        assigned.update(matches)

    logger.debug(
        f"Grouped {len(assigned)} of {len(reviews)} reviews into {len(groups)} groups"
    )
    return groups


def positive_subset(reviews: Iterable[Review], item_type: str) -> List[Review]:
    """Reviews of one item type with a positive or strongly positive sentiment."""
    if item_type not in ITEM_TYPES:
        raise ValueError(f"Invalid item type: {item_type}. Must be 'movie' or 'product'")
    return [
        review for review in reviews
        if review.item_type == item_type and review.sentiment in POSITIVE_SENTIMENTS
    ]


def trending_reviews(reviews: Iterable[Review], limit: int = 10) -> List[Review]:
    """The `limit` most recently created reviews, newest first."""
    ordered = sorted(reviews, key=lambda review: review.created_at, reverse=True)
    return ordered[:max(limit, 0)]


def build_recommendations(
    reviews: Sequence[Review],
    max_groups: int = 5,
    trending_limit: int = 10
) -> Recommendations:
    """
    Build the recommendations page: movie groups, product groups, trending.

    Args:
        reviews: All reviews visible to the page
        max_groups: Groups kept per item type
        trending_limit: Number of recent reviews listed as trending

    Returns:
        Recommendations bundle
    """
    movie_groups = group_similar_reviews(positive_subset(reviews, MOVIE))
    product_groups = group_similar_reviews(positive_subset(reviews, PRODUCT))

    recommendations = Recommendations(
        movies=movie_groups[:max_groups],
        products=product_groups[:max_groups],
        trending=trending_reviews(reviews, trending_limit)
    )

    logger.info(
        f"Built recommendations: {len(recommendations.movies)} movie groups, "
        f"{len(recommendations.products)} product groups, "
        f"{len(recommendations.trending)} trending"
    )
    return recommendations
