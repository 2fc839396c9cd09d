"""Picky Joy web API (FastAPI). The app lives in picky_joy.web.app."""
