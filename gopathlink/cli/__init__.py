"""Command line interface for gopathlink."""
