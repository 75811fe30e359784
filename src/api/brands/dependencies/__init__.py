"""FastAPI dependency wiring for the brands bounded context."""
