"""SQLite persistence for the lookup cache."""
