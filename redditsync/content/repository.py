"""
Content repository: authorized fetches plus translation.

The session store supplies the authorization header, the content client
fetches and filters, and the translation layer fills in translated text.
Content failures propagate to the caller; translation never fails.
"""

from typing import Optional

from redditsync.config.constants import ContentLimits
from redditsync.errors import AuthError, ValidationError
from redditsync.models.content import CommentNode, Listing, Post, Subreddit
from redditsync.observability import LogContext, get_logger
from redditsync.session.store import SessionStore
from redditsync.translation.gateway import TranslationGateway
from redditsync.translation.tree import TreeTranslator

from .client import ContentApiClient

logger = get_logger(__name__)


class ContentRepository:
    def __init__(
        self,
        session_store: SessionStore,
        client: ContentApiClient,
        gateway: TranslationGateway,
        tree_translator: Optional[TreeTranslator] = None,
    ) -> None:
        self.session_store = session_store
        self.client = client
        self.gateway = gateway
        self.tree_translator = tree_translator or TreeTranslator(gateway)

    async def _auth_header(self) -> str:
        header = await self.session_store.auth_header()
        if header is None:
            raise AuthError("Not signed in or session expired")
        return header

    async def home_feed(self, after: Optional[str] = None) -> Listing[Post]:
        return await self.client.fetch_listing("hot.json", await self._auth_header(), after=after)

    async def hot_posts(self, subreddit: str, after: Optional[str] = None) -> Listing[Post]:
        return await self.client.fetch_listing(
            f"r/{subreddit}/hot.json", await self._auth_header(), after=after
        )

    async def new_posts(self, subreddit: str, after: Optional[str] = None) -> Listing[Post]:
        return await self.client.fetch_listing(
            f"r/{subreddit}/new.json", await self._auth_header(), after=after
        )

    async def top_posts(
        self, subreddit: str, time: str = "day", after: Optional[str] = None
    ) -> Listing[Post]:
        if time not in ContentLimits.TOP_TIME_WINDOWS:
            raise ValidationError(f"Unknown time window: {time}")
        return await self.client.fetch_listing(
            f"r/{subreddit}/top.json", await self._auth_header(), after=after, t=time
        )

    async def subreddit_info(self, subreddit: str) -> Subreddit:
        return await self.client.fetch_subreddit(subreddit, await self._auth_header())

    async def search_subreddits(self, query: str) -> Listing[Subreddit]:
        return await self.client.search_subreddits(query, await self._auth_header())

    async def post_detail(
        self,
        subreddit: str,
        post_id: str,
        translate: bool = True,
        sort: str = "best",
    ) -> tuple[Post, list[CommentNode]]:
        """
        Fetch a post with its comment tree, translated when requested.

        Raises:
            AuthError: no valid session
            ValidationError: unknown comment sort
            NetworkError / UpstreamError: the content fetch failed
        """
        if sort not in ContentLimits.COMMENT_SORTS:
            raise ValidationError(f"Unknown comment sort: {sort}")
        post, comments = await self.client.fetch_comments(
            subreddit, post_id, await self._auth_header(), sort=sort
        )
        if not translate:
            return post, comments

        with LogContext(trace_id=post_id):
            post = await self.gateway.translate_post(post)
            comments = await self.tree_translator.translate_tree(comments)
            logger.info(
                "Post detail ready",
                extra={"subreddit": subreddit, "comments": sum(c.count() for c in comments)},
            )
        return post, comments
