"""Vibelytics: mood tracking API with per-user weather snapshots."""

__version__ = "1.0.0"
