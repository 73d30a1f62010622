"""
FastAPI routers grouped by domain.

Each module exposes an APIRouter that the application (app.py) includes.
"""
