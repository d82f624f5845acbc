"""Infrastructure layer: stores, cache, persistence and messaging adapters."""
