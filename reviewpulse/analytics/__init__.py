"""
Analytics for ReviewPulse.

Pure functions over review collections:
- Aggregator: distributions, trends, keyword counts, summaries
- Grouper: similarity groups for recommendations
- Filters: review scopes and search filters
"""
