"""Command modules for the tabpalette CLI."""
