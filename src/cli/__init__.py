"""Command-line interface for the headlines system."""
