"""Readers for Duden dictionary files and a writer for DSL dictionary sources."""

__version__ = "0.6.0"