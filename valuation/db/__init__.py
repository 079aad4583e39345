"""
Database init - Exports for services and routes
"""

from .base import Base

__all__ = ["Base"]
