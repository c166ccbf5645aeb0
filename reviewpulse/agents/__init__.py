"""
Agent implementations for ReviewPulse.

- Sentiment Classification Agent (Gemini) and offline lexicon classifier
- Ingestion Agent
"""
