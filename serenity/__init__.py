"""Serenity: an AI therapy chat backend with an asynchronous message pipeline."""

__version__ = "0.1.0"
