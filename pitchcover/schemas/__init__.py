"""Pydantic models shared by services and the HTTP layer."""
