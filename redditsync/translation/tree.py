"""
Comment tree translation.

Produces a translated copy of a comment forest without changing its shape:
same nodes, same ids, same parent/child edges, same reply order. Only
`body_translated` and the rebuilt `replies` differ.

A node's body and its replies are independent, so the whole tree is
translated concurrently. One semaphore per translator caps in-flight
gateway calls across every tree it is translating at once; it is held
only around the call itself and never across recursion, so deep trees
cannot deadlock on it.
"""

import asyncio
import logging
from typing import Optional

from redditsync.config.settings import settings
from redditsync.models.content import CommentNode
from redditsync.observability import get_logger
from redditsync.observability.metrics import tree_nodes_translated_total

from .gateway import TranslationGateway

logger = get_logger(__name__)


class TreeTranslator:
    """
    Translates comment forests through a TranslationGateway.

    Share one instance between concurrent callers: the in-flight limit is
    per translator, not per tree.
    """

    def __init__(
        self,
        gateway: TranslationGateway,
        max_concurrency: int = settings.TRANSLATION_MAX_CONCURRENCY,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.gateway = gateway
        self.max_concurrency = max_concurrency
        self._semaphore: Optional[asyncio.Semaphore] = None

    @property
    def semaphore(self) -> asyncio.Semaphore:
        # Created on first use so it belongs to the loop doing the translating
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.max_concurrency)
        return self._semaphore

    async def translate_tree(
        self,
        comments: list[CommentNode],
        source_lang: Optional[str] = None,
        target_lang: Optional[str] = None,
    ) -> list[CommentNode]:
        """
        Return translated copies of `comments`, in the same order.

        Never fails because of translation: nodes whose translation falls
        back simply carry their original text in `body_translated`.
        """
        if not comments:
            return []

        translated, nodes = await self._translate_siblings(comments, source_lang, target_lang)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Translated comment tree", extra={"nodes": nodes})
        return translated

    async def _translate_siblings(
        self,
        nodes: list[CommentNode],
        source_lang: Optional[str],
        target_lang: Optional[str],
    ) -> tuple[list[CommentNode], int]:
        """Translated siblings in order, plus the number of nodes under them."""
        results = await asyncio.gather(
            *(self._translate_node(node, source_lang, target_lang) for node in nodes)
        )
        return [node for node, _ in results], sum(count for _, count in results)

    async def _translate_node(
        self,
        node: CommentNode,
        source_lang: Optional[str],
        target_lang: Optional[str],
    ) -> tuple[CommentNode, int]:
        # Each gather level runs in fresh tasks, so depth does not grow the stack
        body_translated, (replies, descendants) = await asyncio.gather(
            self._translate_body(node.body, source_lang, target_lang),
            self._translate_siblings(node.replies, source_lang, target_lang),
        )

        tree_nodes_translated_total.inc()
        translated = node.model_copy(update={
            "body_translated": body_translated,
            "replies": replies,
        })
        return translated, descendants + 1

    async def _translate_body(
        self,
        body: str,
        source_lang: Optional[str],
        target_lang: Optional[str],
    ) -> str:
        # No network call for passthrough text or cache hits; skip the semaphore
        if not self.gateway.is_translatable(body) or body in self.gateway.cache:
            return await self.gateway.translate(body, source_lang, target_lang)
        async with self.semaphore:
            return await self.gateway.translate(body, source_lang, target_lang)
