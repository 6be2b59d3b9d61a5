"""Notification gating, preferences and dispatch."""
from .client import NotificationClient
from .gate import GateDecision, evaluate, parse_hhmm, should_deliver
from .preferences import NotificationPreferencesStore
from .schemas import DeliveryOutcome, NotificationEvent

__all__ = [
    "DeliveryOutcome",
    "GateDecision",
    "NotificationClient",
    "NotificationEvent",
    "NotificationPreferencesStore",
    "evaluate",
    "parse_hhmm",
    "should_deliver",
]
