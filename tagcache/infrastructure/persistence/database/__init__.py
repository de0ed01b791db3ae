"""Cache database models and connection handle."""
