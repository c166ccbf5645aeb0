"""
Pipeline Orchestrator.

Coordinates loading a review snapshot, scoping it, and producing the
dashboard and recommendation outputs; also applies votes to a snapshot.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from reviewpulse.agents.classification import LexiconClassifier, SentimentClassificationAgent
from reviewpulse.agents.ingestion import IngestionAgent
from reviewpulse.analytics.aggregator import build_dashboard, keyword_dataframe, trend_dataframe
from reviewpulse.analytics.filters import by_author, for_item
from reviewpulse.analytics.grouper import build_recommendations
from reviewpulse.ledger.vote_ledger import InvalidArgumentError, VoteLedger
from reviewpulse.models.review import ITEM_TYPES, VOTE_TYPES, Review
from reviewpulse.models.vote import VoteResult
from reviewpulse.utils.storage import StorageManager
import config.settings as settings

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """
    Runs the analytics pipeline over a review snapshot.

    Load → Ingest (classify if needed) → Scope → Dashboard → Recommendations → Save
    """

    def __init__(
        self,
        output_dir: str,
        classify: bool = False,
        use_mock_classifier: bool = True,
        api_key: str = ""
    ):
        """
        Initialize pipeline orchestrator.

        Args:
            output_dir: Directory for report outputs
            classify: Classify documents that lack a sentiment
            use_mock_classifier: Use the offline lexicon instead of Gemini
            api_key: Google API key (required when classifying with Gemini)
        """
        logger.info("Initializing pipeline components...")

        self.storage = StorageManager(output_dir)
        self.ledger = VoteLedger()

        classifier = None
        if classify:
            if use_mock_classifier:
                classifier = LexiconClassifier()
            else:
                if not api_key:
                    raise ValueError("GOOGLE_API_KEY is required for LLM classification")
                classifier = SentimentClassificationAgent(
                    api_key=api_key,
                    model_name=settings.CLASSIFICATION_MODEL,
                    temperature=settings.LLM_TEMPERATURE,
                    max_retries=settings.CLASSIFICATION_MAX_RETRIES
                )
        self.ingestion_agent = IngestionAgent(classifier=classifier)

        logger.info("Pipeline initialized successfully")

    def load_reviews(self, reviews_path: str) -> List[Review]:
        documents = self.storage.load_review_documents(reviews_path)
        return self.ingestion_agent.ingest(documents)

    def run(
        self,
        reviews_path: str,
        item_type: Optional[str] = None,
        item_name: Optional[str] = None,
        author_id: Optional[str] = None,
        top_n: int = settings.DEFAULT_TOP_KEYWORDS
    ) -> Dict[str, str]:
        """
        Produce dashboard and recommendation outputs for a review snapshot.

        Args:
            reviews_path: JSON snapshot of reviews
            item_type: Restrict to one movie/product (with item_name)
            item_name: Movie title or product name
            author_id: Restrict to one author's reviews
            top_n: Number of top keywords

        Returns:
            Mapping of output name -> written file path
        """
        start_time = datetime.now()
        reviews = self.load_reviews(reviews_path)

        scoped = self._scope(reviews, item_type, item_name, author_id)
        logger.info(f"Scoped {len(scoped)} of {len(reviews)} reviews")

        report = build_dashboard(scoped, top_n=top_n, emotions_limit=settings.TOP_EMOTIONS_LIMIT)
        recommendations = build_recommendations(
            scoped,
            max_groups=settings.MAX_RECOMMENDATION_GROUPS,
            trending_limit=settings.TRENDING_LIMIT
        )

        outputs = {
            "dashboard": self.storage.save_json(report.to_dict(), "dashboard.json"),
            "sentiment_trend": self.storage.save_dataframe(
                trend_dataframe(report.time_trend), "sentiment_trend.csv"
            ),
            "top_keywords": self.storage.save_dataframe(
                keyword_dataframe(report.top_keywords), "top_keywords.csv"
            ),
            "recommendations": self.storage.save_json(
                recommendations.to_dict(), "recommendations.json"
            ),
        }

        processing_time = (datetime.now() - start_time).total_seconds()
        logger.info(f"Pipeline complete in {processing_time:.2f}s: {len(outputs)} outputs written")
        return outputs

    def apply_vote(
        self,
        reviews_path: str,
        review_id: str,
        voter_id: str,
        vote_type: str
    ) -> VoteResult:
        """
        Cast a vote on one review of a snapshot and save the snapshot.

        Raises:
            InvalidArgumentError: If the vote type is malformed
            LookupError: If the review is not in the snapshot
            ValueError: If the snapshot holds documents that could not be loaded
        """
        if vote_type not in VOTE_TYPES:
            raise InvalidArgumentError(
                f"Invalid vote type: {vote_type!r}. Must be 'up' or 'down'"
            )

        reviews = self.load_reviews(reviews_path)
        if self.ingestion_agent.skipped:
            # Rewriting would drop the malformed documents
            raise ValueError(
                f"Snapshot has {self.ingestion_agent.skipped} malformed documents, "
                f"refusing to rewrite {reviews_path}"
            )

        target = next((r for r in reviews if r.review_id == review_id), None)
        if target is None:
            raise LookupError(f"Review not found: {review_id}")

        result = self.ledger.cast_vote(target, voter_id, vote_type)
        self.storage.save_reviews(reviews, reviews_path)

        logger.info(
            f"Vote {result.action} on {review_id} by {voter_id} "
            f"(up={result.upvote_count}, down={result.downvote_count})"
        )
        return result

    @staticmethod
    def _scope(
        reviews: List[Review],
        item_type: Optional[str],
        item_name: Optional[str],
        author_id: Optional[str]
    ) -> List[Review]:
        if item_type is not None and item_type not in ITEM_TYPES:
            raise ValueError(f"Invalid item type: {item_type}. Must be 'movie' or 'product'")

        scoped = reviews
        if item_type and item_name:
            scoped = for_item(scoped, item_type, item_name)
        elif item_type:
            scoped = [r for r in scoped if r.item_type == item_type]
        if author_id:
            scoped = by_author(scoped, author_id)
        return scoped
