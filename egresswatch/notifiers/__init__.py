"""Notifiers for newly discovered intents."""

from .base import BaseNotifier
from .github import GitHubDispatchNotifier

__all__ = ["BaseNotifier", "GitHubDispatchNotifier"]
