"""Basecamp XML backup to Redmine import."""

__version__ = "0.3.0"
