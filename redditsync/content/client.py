"""
Content API client.

Thin httpx wrapper over the listing, comments and subreddit endpoints.
Failures are surfaced verbatim to the caller (for UI retry):

- NetworkError: connection failure or timeout
- UpstreamError: non-2xx status or a body that does not parse
"""

from typing import Any, Optional

import httpx

from redditsync.config.constants import ContentLimits, Timeouts
from redditsync.config.settings import settings
from redditsync.errors import NetworkError, UpstreamError
from redditsync.models.content import CommentNode, Listing, Post, Subreddit
from redditsync.observability import get_logger, record_content_error

from .mapper import map_comments, map_listing, map_post, map_subreddit

logger = get_logger(__name__)


class ContentApiClient:
    """Fetches listings and comment trees from the content API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = (base_url or settings.REDDIT_API_BASE_URL).rstrip("/")
        self.user_agent = user_agent or settings.REDDIT_USER_AGENT
        self._client = http_client

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=Timeouts.HTTP_DEFAULT)
        return self._client

    async def _get_json(
        self,
        operation: str,
        path: str,
        auth_header: str,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        query = {k: v for k, v in (params or {}).items() if v is not None}
        headers = {"Authorization": auth_header, "User-Agent": self.user_agent}

        try:
            response = await self._http().get(url, params=query, headers=headers)
        except httpx.TimeoutException as e:
            record_content_error(operation, "timeout")
            raise NetworkError(f"{operation} timed out") from e
        except httpx.HTTPError as e:
            record_content_error(operation, "network")
            raise NetworkError(f"{operation} failed: {e}") from e

        if not response.is_success:
            record_content_error(operation, "upstream")
            logger.warning(
                f"{operation} returned HTTP {response.status_code}",
                extra={"path": path},
            )
            raise UpstreamError(
                f"Failed to {operation}: HTTP {response.status_code} {response.reason_phrase}",
                response.status_code,
            )

        try:
            return response.json()
        except (ValueError, RecursionError) as e:
            # RecursionError: nesting deeper than the JSON decoder will follow
            record_content_error(operation, "malformed")
            raise UpstreamError(f"Failed to {operation}: malformed body", response.status_code) from e

    async def fetch_listing(
        self,
        endpoint: str,
        auth_header: str,
        after: Optional[str] = None,
        limit: int = ContentLimits.LISTING_PAGE_SIZE,
        **params: Any,
    ) -> Listing[Post]:
        """
        Fetch one page of posts.

        Args:
            endpoint: listing path, e.g. "hot.json" or "r/python/new.json"
            auth_header: "bearer <token>"
            after: pagination cursor from the previous page
        """
        payload = await self._get_json(
            "fetch listing", endpoint, auth_header, {"limit": limit, "after": after, **params}
        )
        try:
            return map_listing(payload, map_post)
        except (KeyError, TypeError, AttributeError) as e:
            record_content_error("fetch listing", "malformed")
            raise UpstreamError(f"Malformed listing: {e}") from e

    async def fetch_comments(
        self,
        subreddit: str,
        post_id: str,
        auth_header: str,
        sort: str = "best",
        limit: int = ContentLimits.COMMENTS_LIMIT,
    ) -> tuple[Post, list[CommentNode]]:
        """
        Fetch a post and its filtered comment tree.

        The endpoint returns [post_listing, comments_listing].
        """
        payload = await self._get_json(
            "fetch comments",
            f"r/{subreddit}/comments/{post_id}.json",
            auth_header,
            {"sort": sort, "limit": limit},
        )
        try:
            post_children = payload[0]["data"]["children"]
            post = map_post(post_children[0]["data"])
            comment_children = payload[1]["data"]["children"] if len(payload) > 1 else []
            comments = map_comments(comment_children)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            record_content_error("fetch comments", "malformed")
            raise UpstreamError(f"Malformed comments payload: {e}") from e

        logger.debug(
            "Fetched comments",
            extra={"post_id": post_id, "top_level": len(comments)},
        )
        return post, comments

    async def fetch_subreddit(self, subreddit: str, auth_header: str) -> Subreddit:
        payload = await self._get_json("fetch subreddit info", f"r/{subreddit}/about.json", auth_header)
        data = (payload or {}).get("data")
        if not data:
            raise UpstreamError("Subreddit not found", 404)
        return map_subreddit(data)

    async def search_subreddits(
        self,
        query: str,
        auth_header: str,
        limit: int = ContentLimits.LISTING_PAGE_SIZE,
    ) -> Listing[Subreddit]:
        payload = await self._get_json(
            "search subreddits",
            "subreddits/search.json",
            auth_header,
            {"q": query, "limit": limit, "type": "sr"},
        )
        return map_listing(payload, map_subreddit)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
