"""
Vote Ledger Module.

Single-vote-per-voter state and tallies for reviews.
"""
