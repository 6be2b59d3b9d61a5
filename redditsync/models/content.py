"""
Content models: posts, recursive comment trees, subreddits and listings.

Comment trees are owned top-down: each node holds its replies in API order
and has no back-pointer other than the `parent_id` fullname string.
"""

from typing import Generic, Iterator, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class CommentNode(BaseModel):
    """A single comment and its (already filtered) reply subtree."""

    model_config = ConfigDict(frozen=True)

    id: str
    author: str
    body: str
    body_translated: Optional[str] = None
    score: int = 0
    created: int = 0  # epoch ms
    depth: int = 0
    parent_id: Optional[str] = None
    replies: list["CommentNode"] = Field(default_factory=list)
    is_stickied: bool = False
    is_score_hidden: bool = False

    def walk(self) -> Iterator["CommentNode"]:
        """Pre-order traversal of this node and all descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.replies))

    def count(self) -> int:
        return sum(1 for _ in self.walk())

    @property
    def display_body(self) -> str:
        """Translated body when available, otherwise the original."""
        return self.body_translated or self.body


CommentNode.model_rebuild()


class Post(BaseModel):
    """A link or self post."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    title_translated: Optional[str] = None
    author: str
    subreddit: str
    selftext: Optional[str] = None
    selftext_translated: Optional[str] = None
    url: Optional[str] = None
    thumbnail: Optional[str] = None
    score: int = 0
    num_comments: int = 0
    created: int = 0  # epoch ms
    is_video: bool = False
    is_image: bool = False
    is_gif: bool = False
    domain: Optional[str] = None
    permalink: str = ""
    is_stickied: bool = False
    is_nsfw: bool = False

    @property
    def needs_translation(self) -> bool:
        return self.title_translated is None or (
            self.selftext is not None and self.selftext_translated is None
        )


class Subreddit(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    title: str = ""
    description: Optional[str] = None
    subscribers: int = 0
    icon_img: Optional[str] = None
    banner_img: Optional[str] = None
    is_nsfw: bool = False
    public_description: Optional[str] = None


class Listing(BaseModel, Generic[T]):
    """One page of a paginated listing plus its opaque cursors."""

    items: list[T] = Field(default_factory=list)
    after: Optional[str] = None
    before: Optional[str] = None
