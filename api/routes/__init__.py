"""API routes package"""

from . import auth, users, premium, generation, health

__all__ = ["auth", "users", "premium", "generation", "health"]
