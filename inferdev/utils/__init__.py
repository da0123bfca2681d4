"""Logging, exceptions, constants and formatting helpers."""
