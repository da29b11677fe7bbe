"""Database layer: models, repositories and session management."""
