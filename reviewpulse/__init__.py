"""
ReviewPulse - sentiment analytics, vote ledger and recommendations for
movie and product reviews.
"""
