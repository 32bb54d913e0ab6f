"""
Web UI Module - FastAPI-based web interface
===========================================

This module provides the web surface of MediAI Pro, including:
- Chat endpoint backed by the response selector
- Consultation analysis and report downloads
- Patient and recording endpoints
- A minimal chat page
"""

from .app import create_app, run_app
from .routes import router

__all__ = [
    "create_app",
    "run_app",
    "router",
]
