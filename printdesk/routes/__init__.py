"""Routes package for printdesk."""

from .auth import auth_bp
from .jobs import jobs_bp

__all__ = ["auth_bp", "jobs_bp"]
