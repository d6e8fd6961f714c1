"""Core services: configuration, the cleanup pipeline, reporting and summaries."""
