"""
High-level use cases for the SFHB API.

Routers (FastAPI endpoints) call these services instead of reading or
writing the JSON data file directly.
"""
