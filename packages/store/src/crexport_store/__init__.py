"""Comment table storage for crexport."""
