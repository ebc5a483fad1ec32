"""psql-mapper — every table of a PostgreSQL database as a generic REST CRUD resource.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
