"""Pydantic schemas for service arguments and API responses."""
