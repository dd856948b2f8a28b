"""API route definitions."""
