"""Pydantic models shared outside the database layer."""
