"""Comparisons app: a per-user shortlist of equipment to compare side by side."""
