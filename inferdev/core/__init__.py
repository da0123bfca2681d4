"""Core configuration for InferDev."""
