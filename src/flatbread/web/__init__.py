"""FastAPI viewer for catalog datasets (see app.py)."""
