"""Utility helpers for TimeLog CLI."""
