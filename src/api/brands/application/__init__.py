"""Application layer for the brands bounded context."""
