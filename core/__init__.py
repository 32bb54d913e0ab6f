"""
Core Module - Foundation components for MediAI Pro
==================================================

This module provides the foundational components including:
- Configuration management
- In-memory keyed storage
- Logging setup and audit events
- Exception handling
"""

from .config import Config, load_config, save_config, create_default_config
from .store import MemoryStore
from .exceptions import (
    MediAIError,
    ConfigError,
    ValidationError,
    NotFoundError,
    RuleError,
)
from .logging import setup_logging, get_logger, audit

__all__ = [
    "Config",
    "load_config",
    "save_config",
    "create_default_config",
    "MemoryStore",
    "MediAIError",
    "ConfigError",
    "ValidationError",
    "NotFoundError",
    "RuleError",
    "setup_logging",
    "get_logger",
    "audit",
]
