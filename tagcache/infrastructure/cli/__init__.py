"""Command line interface for the lookup cache."""
