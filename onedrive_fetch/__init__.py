"""
onedrive-fetch: download a file shared through a OneDrive/SharePoint link
using an Entra ID application identity.
"""

__version__ = "1.0.0"
