"""Domain layer for the brands bounded context."""
