"""API module"""

from .routes import tools, health

__all__ = ["tools", "health"]
