"""Storage layer.

This module keeps federated items, collection membership indexes, and
collaborator records in one sharded concurrent map. It powers the
collection-aware CRUD surface of the store facade.
"""
