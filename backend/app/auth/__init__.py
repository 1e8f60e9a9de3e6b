# app/auth/__init__.py
"""
Authentication modules for the interview scheduler.

This package contains:
- identity.py: Canonical authenticated identity model (auth-provider agnostic)
"""
from app.auth.identity import Identity

__all__ = ["Identity"]
