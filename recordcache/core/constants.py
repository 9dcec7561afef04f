"""Core constants shared by the cache, registry and repositories."""

# Primary-key attribute used when a declaration does not name one.
DEFAULT_ID_FIELD = "id"

# Loads above this many rows are logged as a warning (the cache holds the whole table).
DEFAULT_MAX_RECORDS = 500
