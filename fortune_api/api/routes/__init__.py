"""
API routes for the fortune service.
"""

from fortune_api.api.routes import fortunes, health

__all__ = ["fortunes", "health"]
