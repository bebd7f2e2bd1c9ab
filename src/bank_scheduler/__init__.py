"""Bank branch appointment scheduling."""

__version__ = "0.1.0"
