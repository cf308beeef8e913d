# src/forum_core/db/__init__.py
"""Database configuration and utilities."""

from .session import SessionLocal, build_engine, build_session_factory, transaction

__all__ = ["SessionLocal", "build_engine", "build_session_factory", "transaction"]
