"""Application services composing the catalog core with the store."""
