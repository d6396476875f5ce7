"""Application layer - use-case services and background workers."""
