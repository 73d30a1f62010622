"""
Persistence adapters.

These modules encapsulate how articles are stored/retrieved (today a single
JSON file). Services depend on these helpers rather than touching the file.
"""
