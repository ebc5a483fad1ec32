"""Pydantic Schemas — response contracts at the HTTP boundary."""
