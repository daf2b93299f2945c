"""Infrastructure: document store implementations and store-level services."""
