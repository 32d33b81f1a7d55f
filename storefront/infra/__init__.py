"""Infrastructure layer: logging, database and blob storage."""
