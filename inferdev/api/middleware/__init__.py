"""HTTP middleware for request IDs, request logging and error envelopes."""
