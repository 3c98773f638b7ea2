"""Record store, file store and subscription adapters."""
