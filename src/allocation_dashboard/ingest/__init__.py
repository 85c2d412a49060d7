"""Record parsing for the allocation dashboard.

Turns an uploaded CSV (or already-parsed row dicts) into the pandas Dataset
consumed by the aggregation functions, coercing malformed quantities to 0.
"""
