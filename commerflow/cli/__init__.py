"""Command line tools for CommerFlow."""
