"""Bucketwise: bucket-based budgeting backend (allocation & affordability engine)."""

__version__ = "1.0.0"
