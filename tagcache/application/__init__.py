"""Application layer: lookup workflows built on the caches."""
