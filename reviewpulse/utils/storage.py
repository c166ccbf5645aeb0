"""
Storage utility.

File I/O helpers for review snapshots and analytics outputs.
"""

import json
import logging
import os
from typing import Dict, List, Sequence

import pandas as pd

from reviewpulse.models.review import Review

logger = logging.getLogger(__name__)


class StorageManager:
    """
    Manages file I/O for review snapshots and report outputs.

    Handles:
    - Review snapshots (JSON array of review documents)
    - Report files (output_dir/*.json, output_dir/*.csv)
    """

    def __init__(self, output_dir: str):
        """
        Initialize storage manager.

        Args:
            output_dir: Directory for report outputs (created if missing)
        """
        self.output_dir = output_dir
        os.makedirs(self.output_dir, exist_ok=True)

        logger.info(f"Initialized StorageManager with output_dir={output_dir}")

    def load_review_documents(self, path: str) -> List[Dict]:
        """
        Load raw review documents from a JSON snapshot.

        Args:
            path: Path to a JSON array of review documents

        Returns:
            List of review dicts

        Raises:
            FileNotFoundError: If the snapshot does not exist
            ValueError: If the snapshot is not a JSON array
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"Review snapshot not found: {path}")

        with open(path, 'r') as f:
            documents = json.load(f)

        if not isinstance(documents, list):
            raise ValueError(f"Review snapshot must be a JSON array: {path}")

        logger.debug(f"Loaded {len(documents)} review documents from {path}")
        return documents

    def save_reviews(self, reviews: Sequence[Review], path: str) -> None:
        """
        Persist reviews as a JSON snapshot with atomic write pattern.

        Args:
            reviews: Reviews to write
            path: Snapshot path
        """
        self._write_json_atomic([review.to_dict() for review in reviews], path)
        logger.info(f"Saved {len(reviews)} reviews to {path}")

    def save_json(self, data, filename: str) -> str:
        """
        Save a JSON report into the output directory.

        Returns:
            Path of the written file
        """
        path = os.path.join(self.output_dir, filename)
        self._write_json_atomic(data, path)
        logger.info(f"Saved {filename} to {path}")
        return path

    def save_dataframe(self, df: pd.DataFrame, filename: str) -> str:
        """
        Save a DataFrame as CSV into the output directory.

        Returns:
            Path of the written file
        """
        path = os.path.join(self.output_dir, filename)
        try:
            df.to_csv(path, index=False)
            logger.info(f"Saved {filename} ({len(df)} rows) to {path}")
        except Exception as e:
            logger.error(f"Failed to save {filename}: {e}")
            raise
        return path

    def _write_json_atomic(self, data, path: str) -> None:
        """Write to a temp file, then rename over the target."""
        temp_path = f"{path}.tmp"
        try:
            with open(temp_path, 'w') as f:
                json.dump(data, f, indent=2)
            os.replace(temp_path, path)
        except Exception as e:
            logger.error(f"Failed to write {path}: {e}")
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise
