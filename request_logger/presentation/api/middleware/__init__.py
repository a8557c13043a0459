"""Request logging and error translation middleware."""
