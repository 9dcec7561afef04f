"""Infrastructure: the in-memory record cache and its SQLAlchemy integration."""
