"""
Utility modules for ReviewPulse.

Cross-cutting concerns:
- Storage: File I/O helpers for review snapshots and reports
"""
