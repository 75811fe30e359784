"""Infrastructure adapters for the brands bounded context."""
