"""Traversal and find-or-create mapping of a Basecamp backup."""
