"""Hacker News API client, configuration, a JSON HTTP API and an interactive command parser."""

__version__ = "0.1.0"