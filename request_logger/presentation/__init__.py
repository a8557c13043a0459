"""Presentation layer: FastAPI application and middleware."""
