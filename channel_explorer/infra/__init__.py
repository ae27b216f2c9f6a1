"""Infrastructure adapters: store, logging, external APIs."""
