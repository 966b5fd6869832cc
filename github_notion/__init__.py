"""Stateless bridge from GitHub pull request webhooks to Notion tasks."""

__version__ = "0.1.0"
