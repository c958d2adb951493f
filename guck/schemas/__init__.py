"""Schemas for the application."""

from .diff import DiffResponse, FileDiffResponse, StatusResponse

__all__ = ["DiffResponse", "FileDiffResponse", "StatusResponse"]
