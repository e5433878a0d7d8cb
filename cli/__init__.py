"""Command line tools for flatnet."""
