"""Core Layer — pure mapping logic, no IO, no async execution, no DB connections.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - Statement builders return SQLAlchemy constructs; executing them is the shell's job
"""
