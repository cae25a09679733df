"""langid: HTTP language identification with a cached detector front end."""

__version__ = "1.0.0"
