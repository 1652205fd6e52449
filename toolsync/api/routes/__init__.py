"""API Routes"""

from . import tools, health

__all__ = ["tools", "health"]
