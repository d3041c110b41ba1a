"""
speechtrack - Pediatric speech-therapy goal tracking.

Tracks children through ordered therapy goals per disorder category,
records session outcomes, unlocks goals on streaks and builds reports.
"""

__version__ = "0.1.0"
