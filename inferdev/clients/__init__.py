"""Client for the external recommendation backend."""
