"""Aggregation helpers for the allocation dashboard.

This package contains the pure functions that turn a flat allocation Dataset
into derived views: grouping primitives, mean/median helpers, the view
computation itself and the sort/top-N selection used by presentation layers.
"""
