"""Configuration for ReviewPulse."""
