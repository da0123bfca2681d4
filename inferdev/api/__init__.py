"""API layer for InferDev: application factory, dependencies and middleware."""
