"""Command-line utilities for offline inspection of recorded tracks."""
