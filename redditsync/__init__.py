"""
Content synchronization and translation layer for the Reddit viewer.

This package contains the derived-state core shared by the viewer clients:
- Session persistence and auth state (session)
- Translation cache, gateway and comment-tree translation (translation)
- Content API ingestion (content)
- Notification gating and dispatch (notifications)
- Configuration management (Pydantic settings)
"""

__version__ = "0.1.0"
