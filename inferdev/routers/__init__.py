"""API routers for InferDev.

Each module exposes a ``router`` mounted under the API prefix.
"""
