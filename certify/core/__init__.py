"""
Certify Backend - Core Module

This module contains configuration, database setup, error types and
shared infrastructure.
"""

from certify.core.config import Settings, get_settings
from certify.core.database import Base

__all__ = ["Settings", "get_settings", "Base"]
