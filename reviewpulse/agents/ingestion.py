"""
Ingestion Agent.

Turns raw review documents from the review store into Review snapshots,
classifying any document that lacks classification fields.
"""

import logging
from typing import Dict, List, Optional

from reviewpulse.agents.classification import Classification
from reviewpulse.ledger.vote_ledger import recount
from reviewpulse.models.review import Review

logger = logging.getLogger(__name__)


class IngestionAgent:
    """
    Builds Review objects from raw dicts.

    A classifier is optional: without one, documents missing a sentiment
    are skipped.
    """

    def __init__(self, classifier=None):
        """
        Initialize ingestion agent.

        Args:
            classifier: Object with classify(text) -> Classification
                (SentimentClassificationAgent or LexiconClassifier)
        """
        self.classifier = classifier
        self.skipped = 0

        if classifier is None:
            logger.info("Initialized IngestionAgent without classifier")
        else:
            logger.info(f"Initialized IngestionAgent with {type(classifier).__name__}")

    def ingest(self, documents: List[Dict]) -> List[Review]:
        """
        Convert raw documents into reviews.

        Malformed documents are logged and skipped; `self.skipped` holds the
        count for the last call.

        Args:
            documents: Review documents (snake_case or camelCase)

        Returns:
            Reviews in document order, counters reconciled with vote entries
        """
        self.skipped = 0
        reviews = []

        for position, document in enumerate(documents):
            review = self._ingest_one(document, position)
            if review is not None:
                reviews.append(review)

        if self.skipped:
            logger.warning(f"Skipped {self.skipped} malformed review documents")
        logger.info(f"Ingested {len(reviews)} reviews")
        return reviews

    def _ingest_one(self, document: Dict, position: int) -> Optional[Review]:
        if not isinstance(document, dict):
            logger.warning(f"Document {position} is not an object ({type(document).__name__}), skipping")
            self.skipped += 1
            return None

        if not document.get("sentiment"):
            if self.classifier is None:
                logger.warning(f"Document {position} has no sentiment and no classifier is set, skipping")
                self.skipped += 1
                return None
            document = self._with_classification(document)

        try:
            review = Review.from_dict(document)
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Invalid review document at position {position}: {e}")
            self.skipped += 1
            return None

        recount(review)
        return review

    def _with_classification(self, document: Dict) -> Dict:
        """Return a copy of the document with classifier fields filled in."""
        result: Classification = self.classifier.classify(document.get("text", ""))
        enriched = dict(document)
        enriched.update({
            "sentiment": result.sentiment,
            "score": result.score,
            "emotions": result.emotions,
            "keywords": result.keywords
        })
        logger.debug(f"Classified document as {result.sentiment} ({len(result.keywords)} keywords)")
        return enriched
