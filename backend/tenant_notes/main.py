"""
ASGI entrypoint.

Usage:
    uvicorn tenant_notes.main:app --port 4000 --reload
    (from backend/)
"""

from tenant_notes.app import create_app

app = create_app()
