"""Feature modules: protocols and model providers."""
