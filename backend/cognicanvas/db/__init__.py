"""Database package: models, session management and the persistence adapter."""
