"""
Terminal UI Module - Textual-based TUI
=====================================

This module provides a terminal-based user interface using Textual,
for chatting with the assistant and browsing in-memory records.
"""

from .app import MediAIApp, run_tui

__all__ = [
    "MediAIApp",
    "run_tui",
]
