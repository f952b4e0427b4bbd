"""Installer CLI for the n8n self-hosted AI starter kit."""

__version__ = "0.1.0"
