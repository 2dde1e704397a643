"""Utilities: logging and tracing."""
