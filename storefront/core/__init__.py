"""Core catalog logic: filter compilation, similarity ranking and policies."""
