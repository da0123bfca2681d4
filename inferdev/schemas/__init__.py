"""Request and response schemas for the InferDev API."""
