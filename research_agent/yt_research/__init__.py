"""
YouTube transcript research agent.

Aggregates patterns across YouTube transcripts with Gemini and recovers the
structured report even when the model output is cut off.
"""

__version__ = "1.0.0"
