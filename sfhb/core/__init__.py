"""
Core utilities shared across the SFHB API.

This package hosts configuration helpers (env vars, paths, feature flags),
logging setup and the token check used to guard write operations. Routers and
services depend on these primitives instead of reading os.environ directly.
"""
