"""Core publishing components."""
