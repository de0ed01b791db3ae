"""Infrastructure layer: storage, expiry and external result adapters."""
