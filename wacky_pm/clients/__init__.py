"""
Clients for external HTTP APIs.
"""

from wacky_pm.clients.base_client import BaseAPIClient
from wacky_pm.clients.github_client import CreatedIssue, GitHubClient, PublicKey

__all__ = ["BaseAPIClient", "CreatedIssue", "GitHubClient", "PublicKey"]
