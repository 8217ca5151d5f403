"""Infrastructure layer - configuration, database, logging, persistence."""
