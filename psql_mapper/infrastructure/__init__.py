"""Infrastructure Layer — database connection management and logging setup.

Invariants:
    - Infrastructure never builds statements; it only executes what services hand it
"""
