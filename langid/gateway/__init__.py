"""Caching request gateway in front of the language detector."""
