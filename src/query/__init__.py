"""Collection query layer.

This module defines filter and pagination checks, evaluates them over
collection membership, and encodes page cursors as IRI queries.
"""
