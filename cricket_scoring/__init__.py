"""
Cricket Scoring Engine

Ball-by-ball innings scoring and player impact scoring for league
management and live-scoring front-ends.
"""

__version__ = "0.1.0"
