"""Command line interface for crexport."""
