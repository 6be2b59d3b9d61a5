"""
Mapping from raw content API JSON ("things") to domain models.

Comments are filtered once here, at ingestion: a comment without an author,
or with an empty, "[deleted]" or "[removed]" body, is dropped together with
its reply subtree and never re-enters the tree. Child depth is always
derived from the parent so that `child.depth == parent.depth + 1` holds
regardless of what the API reports.
"""

from typing import Any, Optional

from redditsync.models.content import CommentNode, Listing, Post, Subreddit
from redditsync.models.session import ContentUser

COMMENT_KIND = "t1"
REMOVED_BODIES = frozenset({"[deleted]", "[removed]"})


def _ms(seconds: Optional[float]) -> int:
    """Epoch seconds (possibly fractional) to epoch milliseconds."""
    return int((seconds or 0) * 1000)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    return value if value and value.strip() else None


def is_removed(raw: dict[str, Any]) -> bool:
    """True for comments that must not appear in the tree."""
    body = raw.get("body")
    return (
        not raw.get("author")
        or body is None
        or not body.strip()
        or body.strip() in REMOVED_BODIES
    )


def map_post(raw: dict[str, Any]) -> Post:
    url = raw.get("url")
    domain = raw.get("domain")
    post_hint = raw.get("post_hint")
    thumbnail = raw.get("thumbnail")
    is_image = post_hint == "image" or "i.redd.it" in (domain or "")
    is_gif = post_hint == "image" and (".gif" in (url or "") or "gfycat" in (domain or ""))

    return Post(
        id=raw["id"],
        title=raw.get("title", ""),
        author=raw.get("author") or "[deleted]",
        subreddit=raw.get("subreddit", ""),
        selftext=_blank_to_none(raw.get("selftext")),
        url=url,
        thumbnail=thumbnail if thumbnail and thumbnail.startswith("http") else None,
        score=raw.get("score") or 0,
        num_comments=raw.get("num_comments") or 0,
        created=_ms(raw.get("created_utc")),
        is_video=bool(raw.get("is_video")),
        is_image=is_image,
        is_gif=is_gif,
        domain=domain,
        permalink=raw.get("permalink", ""),
        is_stickied=bool(raw.get("stickied")),
        is_nsfw=bool(raw.get("over_18")),
    )


def _reply_children(raw: dict[str, Any]) -> list[dict[str, Any]]:
    # "replies" is "" when a comment has none, otherwise a Listing thing
    replies = raw.get("replies")
    if not isinstance(replies, dict):
        return []
    return replies.get("data", {}).get("children", []) or []


def _build_comment(raw: dict[str, Any], depth: int, replies: list[CommentNode]) -> CommentNode:
    return CommentNode(
        id=raw["id"],
        author=raw["author"],
        body=raw["body"],
        score=raw.get("score") or 0,
        created=_ms(raw.get("created_utc")),
        depth=depth,
        parent_id=raw.get("parent_id"),
        replies=replies,
        is_stickied=bool(raw.get("stickied")),
        is_score_hidden=bool(raw.get("score_hidden")),
    )


def map_comment(raw: dict[str, Any], parent_depth: Optional[int] = None) -> Optional[CommentNode]:
    """
    Map one comment and its replies; returns None if it was deleted/removed.

    Args:
        raw: the comment's `data` object
        parent_depth: depth of the parent comment, None for top-level comments
    """
    nodes = map_comments([{"kind": COMMENT_KIND, "data": raw}], parent_depth=parent_depth)
    return nodes[0] if nodes else None


def map_comments(
    children: list[dict[str, Any]], parent_depth: Optional[int] = None
) -> list[CommentNode]:
    """
    Map a listing's children, skipping non-comment things ("more" stubs) and removed comments.

    Walks the reply listings with an explicit stack, so thread depth is not
    limited by the interpreter's recursion limit.
    """
    # Pre-order pass: (raw, depth, index of the parent in `kept` or None)
    kept: list[tuple[dict[str, Any], int, Optional[int]]] = []
    stack = [(child, parent_depth, None) for child in reversed(children)]
    while stack:
        child, above, parent = stack.pop()
        if child.get("kind") != COMMENT_KIND:
            continue
        raw = child.get("data") or {}
        if is_removed(raw):
            continue
        depth = above + 1 if above is not None else (raw.get("depth") or 0)
        kept.append((raw, depth, parent))
        index = len(kept) - 1
        stack.extend((reply, depth, index) for reply in reversed(_reply_children(raw)))

    # Build bottom-up: every descendant sits after its ancestor in pre-order
    replies: list[list[CommentNode]] = [[] for _ in kept]
    roots: list[CommentNode] = []
    for index in range(len(kept) - 1, -1, -1):
        raw, depth, parent = kept[index]
        node = _build_comment(raw, depth, replies[index][::-1])
        if parent is None:
            roots.append(node)
        else:
            replies[parent].append(node)
    return roots[::-1]


def map_subreddit(raw: dict[str, Any]) -> Subreddit:
    return Subreddit(
        name=raw.get("name", ""),
        display_name=raw.get("display_name", ""),
        title=raw.get("title", ""),
        description=raw.get("description"),
        subscribers=raw.get("subscribers") or 0,
        icon_img=_blank_to_none(raw.get("icon_img")),
        banner_img=_blank_to_none(raw.get("banner_img")),
        is_nsfw=bool(raw.get("over18")),
        public_description=raw.get("public_description"),
    )


def map_user(raw: dict[str, Any]) -> ContentUser:
    return ContentUser(
        id=raw["id"],
        name=raw["name"],
        total_karma=raw.get("total_karma") or 0,
        link_karma=raw.get("link_karma") or 0,
        comment_karma=raw.get("comment_karma") or 0,
        created=_ms(raw.get("created_utc")),
        icon_img=_blank_to_none(raw.get("icon_img")),
        is_employee=bool(raw.get("is_employee")),
        is_gold=bool(raw.get("is_gold")),
        is_premium=bool(raw.get("is_premium")),
    )


def map_listing(payload: dict[str, Any], item_mapper) -> Listing:
    """Map a Listing thing with `item_mapper` applied to each child's data."""
    data = payload.get("data") or {}
    items = [item_mapper(child["data"]) for child in data.get("children", []) if child.get("data")]
    return Listing(items=items, after=data.get("after"), before=data.get("before"))
