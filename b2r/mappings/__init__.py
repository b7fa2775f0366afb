"""Mapping tables between Basecamp and Redmine identifiers."""

from b2r.mappings.mappings import DEFAULT_AUTHOR, Mappings, map_user

__all__ = ["DEFAULT_AUTHOR", "Mappings", "map_user"]
