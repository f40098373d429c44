"""Pure aggregation functions over in-memory collections.

Nothing in this package touches the session; callers pass the rows in.
"""
