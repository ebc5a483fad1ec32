"""Services Layer — catalog introspection, registry building, CRUD execution, dispatch.

Invariants:
    - Services own all IO; statements are built by core/query_builder
"""
