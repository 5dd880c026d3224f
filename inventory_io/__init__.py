"""Device inventory CSV import/export tool (PostgreSQL backed)."""

__version__ = "0.1.0"
