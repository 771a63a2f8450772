"""Dispatch pipeline, ASGI transport adapter, static fallback, and serving."""
