"""HTTP API for the outcome registry."""
