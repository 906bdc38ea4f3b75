"""
Core utilities shared across the newsdesk API.

This package hosts:
- configuration helpers (env vars, data paths, feed sources)
- cross-cutting pieces such as logging setup, token signing and the
  login rate limiter.

Routers and services depend on these primitives instead of reading the
environment or importing jwt directly.
"""
