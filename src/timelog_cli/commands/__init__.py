"""Command modules for TimeLog CLI."""
