"""Command line interface for YBS transit search."""
