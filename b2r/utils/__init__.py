"""Utility modules for the Basecamp to Redmine import."""
