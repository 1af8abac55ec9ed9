"""Recommendations app: preference-based equipment suggestions."""
