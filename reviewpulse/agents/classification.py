"""
Sentiment Classification Agent.

Labels raw review text with a sentiment, an engine score, emotions and
keywords, using LLM-based classification. A lexicon classifier with the
same interface is available for offline runs.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import List

import google.generativeai as genai

from reviewpulse.models.review import EMOTIONS, SENTIMENT_LABELS, SENTIMENT_ORDINALS

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are a review analytics assistant that labels movie and product reviews.

Your task:
1. Read the review text
2. Pick exactly one sentiment label from: strongly_negative, negative, slightly_negative,
   neutral, slightly_positive, positive, strongly_positive
3. Give a sentiment score between -5.0 (most negative) and 5.0 (most positive)
4. List the emotions expressed, chosen only from: happy, sad, angry, surprised, fearful
5. Extract up to 5 short keywords (lowercase, 1-2 words) naming what the review talks about

Rules:
- Emotions may be empty if none is clearly expressed
- Keywords describe the subject (e.g. "plot", "battery life"), not the sentiment
- Do not invent labels outside the lists above

Output valid JSON only."""


def _construct_user_prompt(text: str) -> str:
    """Construct user prompt from review text."""
    return f"""Review Text: "{text}"

Label the review as JSON:
{{
  "sentiment": "...",
  "score": 0.0,
  "emotions": ["..."],
  "keywords": ["..."]
}}"""


@dataclass
class Classification:
    """Classifier output for one review text."""
    sentiment: str = "neutral"
    score: float = 0.0
    emotions: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.sentiment not in SENTIMENT_ORDINALS:
            raise ValueError(f"Invalid sentiment: {self.sentiment}")

    @classmethod
    def neutral(cls) -> "Classification":
        return cls()


class SentimentClassificationAgent:
    """
    Classifies review text with an LLM (Gemini).

    Malformed fields in a response are repaired rather than rejected:
    unknown emotions are dropped and an unknown sentiment falls back to
    neutral.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-1.5-flash",
        temperature: float = 0.0,
        max_retries: int = 3,
        max_keywords: int = 5
    ):
        """
        Initialize classification agent.

        Args:
            api_key: Gemini API key
            model_name: Gemini model to use
            temperature: LLM temperature (0.0 for deterministic)
            max_retries: Number of attempts on API or JSON failure
            max_keywords: Keywords kept per review
        """
        self.model_name = model_name
        self.temperature = temperature
        self.max_retries = max_retries
        self.max_keywords = max_keywords

        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(
            model_name=model_name,
            generation_config={
                "temperature": temperature,
                "response_mime_type": "application/json"
            },
            system_instruction=SYSTEM_PROMPT
        )

        logger.info(f"Initialized SentimentClassificationAgent with model={model_name}, temp={temperature}")

    def classify(self, text: str) -> Classification:
        """
        Classify one review text.

        Args:
            text: Review body

        Returns:
            Classification; neutral with no emotions/keywords for empty text
            or when every attempt fails
        """
        if not text or not text.strip():
            logger.debug("Empty review text, returning neutral classification")
            return Classification.neutral()

        user_prompt = _construct_user_prompt(text)

        for attempt in range(self.max_retries):
            try:
                response = self.model.generate_content(user_prompt)
                return self._parse_llm_response(response.text)

            except json.JSONDecodeError as e:
                logger.error(f"Failed to parse LLM JSON response (attempt {attempt + 1}): {e}")

            except Exception as e:
                logger.error(f"LLM API error (attempt {attempt + 1}): {e}")

        logger.warning("Max retries reached, returning neutral classification")
        return Classification.neutral()

    def _parse_llm_response(self, response_text: str) -> Classification:
        """
        Parse LLM JSON response into a Classification.

        Raises:
            json.JSONDecodeError: If response is not valid JSON
        """
        data = json.loads(response_text)
        if not isinstance(data, dict):
            logger.warning(f"Unexpected LLM response shape: {type(data).__name__}")
            return Classification.neutral()

        sentiment = data.get("sentiment")
        if sentiment not in SENTIMENT_ORDINALS:
            logger.warning(f"Unknown sentiment '{sentiment}' in LLM response, using neutral")
            sentiment = "neutral"

        try:
            score = float(data.get("score", 0.0))
        except (TypeError, ValueError):
            logger.warning(f"Invalid score '{data.get('score')}' in LLM response, using 0.0")
            score = 0.0

        emotions = []
        for emotion in data.get("emotions") or []:
            if emotion in EMOTIONS and emotion not in emotions:
                emotions.append(emotion)
            elif emotion not in EMOTIONS:
                logger.debug(f"Dropping unknown emotion '{emotion}'")

        keywords = []
        for keyword in data.get("keywords") or []:
            keyword = str(keyword).strip().lower()
            if keyword and keyword not in keywords:
                keywords.append(keyword)

        return Classification(
            sentiment=sentiment,
            score=score,
            emotions=emotions,
            keywords=keywords[:self.max_keywords]
        )


# Small word lists for offline runs; not a substitute for the LLM
_POSITIVE_WORDS = {
    "good", "great", "excellent", "amazing", "love", "loved", "awesome",
    "fantastic", "wonderful", "best", "enjoyed", "fun", "perfect", "brilliant"
}
_NEGATIVE_WORDS = {
    "bad", "terrible", "awful", "hate", "hated", "worst", "boring", "poor",
    "broken", "disappointing", "waste", "horrible", "cheap", "slow"
}
_EMOTION_WORDS = {
    "happy": {"happy", "love", "loved", "enjoyed", "fun", "delighted", "joy"},
    "sad": {"sad", "cried", "tears", "depressing", "heartbreaking"},
    "angry": {"angry", "furious", "hate", "hated", "annoying", "worst"},
    "surprised": {"surprised", "unexpected", "shocking", "twist", "wow"},
    "fearful": {"scary", "terrifying", "afraid", "creepy", "horror"},
}
_STOPWORDS = {
    "the", "a", "an", "and", "or", "but", "is", "was", "were", "it", "this",
    "that", "of", "to", "in", "on", "for", "with", "i", "my", "me", "so",
    "very", "really", "just", "not", "be", "are", "at", "as", "its", "too"
}
_WORD_RE = re.compile(r"[a-z']+")


class LexiconClassifier:
    """
    Deterministic offline classifier with the same interface as the agent.
    """

    def __init__(self, max_keywords: int = 5):
        self.max_keywords = max_keywords
        logger.info("Initialized LexiconClassifier (offline mode)")

    def classify(self, text: str) -> Classification:
        words = _WORD_RE.findall((text or "").lower())
        if not words:
            return Classification.neutral()

        balance = (
            sum(1 for w in words if w in _POSITIVE_WORDS)
            - sum(1 for w in words if w in _NEGATIVE_WORDS)
        )
        # Balance clamps onto the 7-point scale
        ordinal = max(-3, min(3, balance))

        emotions = [
            emotion for emotion, cues in _EMOTION_WORDS.items()
            if any(w in cues for w in words)
        ]

        keywords = []
        for word in words:
            if (
                len(word) > 2
                and word not in _STOPWORDS
                and word not in _POSITIVE_WORDS
                and word not in _NEGATIVE_WORDS
                and word not in keywords
            ):
                keywords.append(word)

        return Classification(
            sentiment=SENTIMENT_LABELS[ordinal + 3],
            score=float(balance),
            emotions=emotions,
            keywords=keywords[:self.max_keywords]
        )
