"""
In-memory storage for the client runtime
"""

from .cache import Cache

__all__ = ["Cache"]
