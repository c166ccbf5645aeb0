"""
ReviewPulse - Review Sentiment Analytics

CLI entry point for building dashboards and recommendations from a review
snapshot, and for casting votes on it.
"""

import argparse
import logging
import sys

from reviewpulse.ledger.vote_ledger import InvalidArgumentError
from reviewpulse.orchestrator import PipelineOrchestrator
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ReviewPulse - Sentiment analytics and recommendations for reviews",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Dashboard and recommendations for every review
  python main.py --reviews data/reviews.json

  # Analytics for a single movie
  python main.py --reviews data/reviews.json --item-type movie --item-name "Inception"

  # Classify unlabeled reviews with Gemini first
  python main.py --reviews data/reviews.json --classify --llm-classifier

  # Upvote a review (repeat to retract)
  python main.py --reviews data/reviews.json --vote r-42 user-7 up

Note: Set GOOGLE_API_KEY environment variable when using --llm-classifier.
        """
    )

    parser.add_argument(
        "--reviews",
        default=str(settings.DEFAULT_REVIEWS_FILE),
        help=f"Review snapshot JSON (default: {settings.DEFAULT_REVIEWS_FILE})"
    )

    parser.add_argument(
        "--item-type",
        choices=["movie", "product"],
        help="Restrict analytics to one item type"
    )

    parser.add_argument(
        "--item-name",
        help="Restrict analytics to one movie/product (requires --item-type)"
    )

    parser.add_argument(
        "--author",
        help="Restrict analytics to one author id"
    )

    parser.add_argument(
        "--top-keywords",
        type=int,
        default=settings.DEFAULT_TOP_KEYWORDS,
        help=f"Number of top keywords (default: {settings.DEFAULT_TOP_KEYWORDS})"
    )

    parser.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Output directory (default: {settings.OUTPUT_ROOT})"
    )

    parser.add_argument(
        "--classify",
        action="store_true",
        help="Classify reviews that have no sentiment"
    )

    parser.add_argument(
        "--llm-classifier",
        action="store_true",
        default=not settings.USE_MOCK_CLASSIFIER,
        help="Classify with Gemini instead of the offline lexicon"
    )

    parser.add_argument(
        "--vote",
        nargs=3,
        metavar=("REVIEW_ID", "VOTER_ID", "VOTE_TYPE"),
        help="Cast a vote (up/down) on a review and save the snapshot"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    return parser


def main():
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if args.item_name and not args.item_type:
        parser.error("--item-name requires --item-type")

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    if args.classify and args.llm_classifier and not settings.GOOGLE_API_KEY:
        logger.error(
            "GOOGLE_API_KEY environment variable not set. "
            "Set it or drop --llm-classifier to use the offline classifier."
        )
        sys.exit(1)

    try:
        orchestrator = PipelineOrchestrator(
            output_dir=args.output_dir,
            classify=args.classify,
            use_mock_classifier=not args.llm_classifier,
            api_key=settings.GOOGLE_API_KEY
        )

        if args.vote:
            review_id, voter_id, vote_type = args.vote
            result = orchestrator.apply_vote(args.reviews, review_id, voter_id, vote_type)
            print(
                f"Vote {result.action}: {voter_id} -> {result.vote} "
                f"(up={result.upvote_count}, down={result.downvote_count})"
            )
            sys.exit(0)

        print("=" * 60)
        print("ReviewPulse - Review Sentiment Analytics")
        print("=" * 60)
        print(f"Reviews: {args.reviews}")
        if args.item_type:
            print(f"Scope: {args.item_type} {args.item_name or '(all)'}")
        if args.author:
            print(f"Author: {args.author}")
        print("=" * 60)

        outputs = orchestrator.run(
            reviews_path=args.reviews,
            item_type=args.item_type,
            item_name=args.item_name,
            author_id=args.author,
            top_n=args.top_keywords
        )

        print()
        print("Outputs:")
        for name, path in outputs.items():
            print(f"  {name}: {path}")

        logger.info("ReviewPulse completed successfully")
        sys.exit(0)

    except InvalidArgumentError as e:
        logger.error(f"Rejected vote: {e}")
        sys.exit(1)

    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Pipeline failed: {e}", exc_info=True)
        print(f"\nPipeline failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
