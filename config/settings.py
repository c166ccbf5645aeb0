"""
Configuration settings for ReviewPulse.

Centralized configuration for the analytics core, the classification agent
and the command-line pipeline.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = PROJECT_ROOT / "data"
OUTPUT_ROOT = PROJECT_ROOT / "output"
DEFAULT_REVIEWS_FILE = DATA_ROOT / "reviews.json"

# API Configuration
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")

# Classification Agent
CLASSIFICATION_MODEL = "gemini-1.5-flash"
LLM_TEMPERATURE = 0.0  # 0.0 for deterministic labels
CLASSIFICATION_MAX_RETRIES = 3
USE_MOCK_CLASSIFIER = os.getenv("REVIEWPULSE_MOCK_CLASSIFIER", "1") == "1"

# Analytics
DEFAULT_TOP_KEYWORDS = 10
TOP_EMOTIONS_LIMIT = 5

# Recommendations
MAX_RECOMMENDATION_GROUPS = 5
TRENDING_LIMIT = 10

# Logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "reviewpulse.log"
