"""Application logging and the import error log."""
