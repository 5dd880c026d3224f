"""Command line interface (``python -m inventory_io.cli``)."""
