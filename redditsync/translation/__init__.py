"""
Translation Module

Provides cached, fallback-safe translation for posts and comment trees.

Usage:
    gateway = TranslationGateway.from_settings()
    translated = await gateway.translate("Hello there")
    tree = await TreeTranslator(gateway).translate_tree(comments)
"""

from .cache import EvictionPolicy, TranslationCache
from .client import TranslationApiClient
from .gateway import TranslationGateway
from .tree import TreeTranslator

__all__ = [
    "EvictionPolicy",
    "TranslationApiClient",
    "TranslationCache",
    "TranslationGateway",
    "TreeTranslator",
]
