"""Verse enrichment service for the fellowship app."""

__version__ = "1.0.0"
