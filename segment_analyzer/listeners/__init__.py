"""Span listeners turning segment events into records."""

from .base import SpanListener, SpanListenerFactory
from .multi_scopes import MultiScopesSpanListener, MultiScopesSpanListenerFactory

__all__ = [
    "SpanListener",
    "SpanListenerFactory",
    "MultiScopesSpanListener",
    "MultiScopesSpanListenerFactory",
]
