"""Fixture generation.

This module builds reproducible random items for seeding stores in tests.
"""
