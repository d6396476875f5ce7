"""Infrastructure layer - integrations, persistence, observability."""
