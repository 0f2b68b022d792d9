"""apache-modssl internal implementation."""
