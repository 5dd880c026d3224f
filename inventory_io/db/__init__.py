"""PostgreSQL device store."""
