"""
WebSocket transport for the game engine.
"""

from .server import app

__all__ = ["app"]
