"""Pydantic schemas for API requests, responses and catalog data shapes."""
