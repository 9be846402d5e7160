"""Agora: real-time chat and Q&A forum backend."""

__version__ = "0.1.0"
