"""Local code review: diff computation engine and HTTP API."""

__version__ = "0.1.0"
