"""
Microsoft Graph API Layer.

This package handles all communication with Entra ID and Microsoft Graph.
"""

from .auth import GraphAuthenticator
from .client import GraphClient

__all__ = ["GraphAuthenticator", "GraphClient"]
