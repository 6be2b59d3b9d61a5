"""Gated notification dispatch to the push transport."""
from collections import OrderedDict, deque
from datetime import datetime
from typing import Any, Optional

from redis.asyncio import Redis

from redditsync.config.settings import settings
from redditsync.errors import StorageError
from redditsync.models.notification import NotificationCategory
from redditsync.observability import get_logger
from redditsync.observability.metrics import notification_dispatch_total

from .gate import evaluate
from .preferences import NotificationPreferencesStore
from .schemas import DeliveryOutcome, NotificationEvent

logger = get_logger(__name__)


class NotificationClient:
    """Checks the notification gate, then hands events to the push transport.

    The transport (device delivery) subscribes to a Redis channel; this client
    only publishes. Every attempt, sent or not, is recorded in a bounded
    per-user history.

    Example:
        notifier = NotificationClient(prefs_store, "redis://redis:6379")
        outcome = await notifier.dispatch("u_123", NotificationCategory.MENTIONS,
                                          "You were mentioned", "in r/python")
    """

    def __init__(
        self,
        preferences: NotificationPreferencesStore,
        redis_url: Optional[str] = None,
        channel: Optional[str] = None,
        service_name: str = "redditsync",
        history_limit: int = settings.NOTIFICATION_HISTORY_LIMIT,
        max_history_users: int = settings.NOTIFICATION_HISTORY_MAX_USERS,
    ) -> None:
        """Initialize notification client.

        Args:
            preferences: Store the per-user preferences are read from
            redis_url: Redis connection URL (e.g., redis://redis:6379)
            channel: Redis channel the push transport subscribes to
            service_name: Name reported in published events
            history_limit: Outcomes kept per user
            max_history_users: Users tracked in history; the least recently
                notified user is dropped first
        """
        self.preferences = preferences
        self.redis_url = redis_url or settings.REDIS_URL
        self.channel = channel or settings.NOTIFICATION_CHANNEL
        self.service_name = service_name
        self.redis: Optional[Redis] = None
        self.history_limit = history_limit
        self.max_history_users = max_history_users
        self._history: OrderedDict[str, deque[DeliveryOutcome]] = OrderedDict()

    async def _get_redis(self) -> Redis:
        """Get or create Redis connection."""
        if self.redis is None:
            self.redis = Redis.from_url(self.redis_url, decode_responses=True)
        return self.redis

    async def dispatch(
        self,
        user_id: str,
        category: NotificationCategory,
        title: str,
        body: str,
        data: Optional[dict[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> DeliveryOutcome:
        """Deliver a notification unless the gate suppresses it.

        Note:
            Never raises for storage or transport failures. Unreadable
            preferences suppress the notification; publish failures are
            recorded with status "failed".
        """
        category = NotificationCategory(category)
        now = now or datetime.now()

        try:
            prefs = await self.preferences.get(user_id)
        except StorageError as e:
            logger.warning(
                f"Notification settings unavailable, skipping: {e}",
                extra={"user_id": user_id},
            )
            return self._record(user_id, category, title, "skipped", "preferences_unavailable")

        decision = evaluate(prefs, category, now)
        if not decision.deliver:
            logger.info(
                "Notification skipped",
                extra={"user_id": user_id, "category": category.value, "reason": decision.reason},
            )
            return self._record(user_id, category, title, "skipped", decision.reason)

        try:
            event = NotificationEvent(
                user_id=user_id,
                category=category,
                title=title,
                body=body,
                data=data or {},
                service=self.service_name,
            )
            redis = await self._get_redis()
            await redis.publish(self.channel, event.model_dump_json())
        except Exception as e:
            # Fire-and-forget: log and record, never crash the caller
            logger.warning(
                f"Failed to publish notification: {e}",
                extra={"user_id": user_id, "category": category.value},
            )
            return self._record(user_id, category, title, "failed", "transport_error")

        logger.debug(
            "Notification published",
            extra={"user_id": user_id, "category": category.value},
        )
        return self._record(user_id, category, title, "sent", decision.reason)

    def history(
        self, user_id: str, limit: Optional[int] = None, offset: int = 0
    ) -> list[DeliveryOutcome]:
        """Recorded outcomes for `user_id`, newest first, skipping the first `offset`."""
        outcomes = list(self._history.get(user_id, ()))[offset:]
        return outcomes[:limit] if limit is not None else outcomes

    def _record(
        self,
        user_id: str,
        category: NotificationCategory,
        title: str,
        status: str,
        reason: str,
    ) -> DeliveryOutcome:
        outcome = DeliveryOutcome(
            user_id=user_id, category=category, title=title, status=status, reason=reason
        )
        self._user_history(user_id).appendleft(outcome)
        notification_dispatch_total.labels(status=status).inc()
        return outcome

    def _user_history(self, user_id: str) -> deque[DeliveryOutcome]:
        outcomes = self._history.get(user_id)
        if outcomes is None:
            outcomes = self._history[user_id] = deque(maxlen=self.history_limit)
            while len(self._history) > self.max_history_users:
                self._history.popitem(last=False)
        else:
            self._history.move_to_end(user_id)
        return outcomes

    async def close(self) -> None:
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
