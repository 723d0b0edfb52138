"""edusync: incremental YouTube sync for education creators."""

__version__ = "0.1.0"
