"""
Data models for ReviewPulse.

- Review: sentiment-tagged review with a Movie | Product item
- Analytics, recommendation and vote result structures
- UserPreferences: saved items, follows and search history
"""
