"""API route handlers."""

from api.routes import health, rewards

__all__ = ["health", "rewards"]
