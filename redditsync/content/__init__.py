"""Content API ingestion: mapping, fetching and the translating repository."""
from .client import ContentApiClient
from .mapper import map_comment, map_comments, map_post
from .repository import ContentRepository

__all__ = [
    "ContentApiClient",
    "ContentRepository",
    "map_comment",
    "map_comments",
    "map_post",
]
