"""
Middleware package for the marketplace API.
"""

from .validation import ValidationMiddleware

__all__ = [
    "ValidationMiddleware"
]
