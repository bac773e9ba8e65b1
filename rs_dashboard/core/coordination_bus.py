from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

HIGHLIGHT = "highlight"
UNHIGHLIGHT = "unhighlight"
YEAR_CHANGED = "yearChanged"
COUNTRY_HOVERED = "countryHovered"
ATTRIBUTE_CHANGED = "attributeChanged"

CHANNELS = (HIGHLIGHT, UNHIGHLIGHT, YEAR_CHANGED, COUNTRY_HOVERED, ATTRIBUTE_CHANGED)

Handler = Callable[[Any], None]


@dataclass(frozen=True)
class HighlightEvent:
    """
    Transient hover/highlight payload: one of year or country, plus whether
    the highlight starts (active=True) or ends.
    """

    year: Optional[int] = None
    country: Optional[str] = None
    active: bool = True


class CoordinationBus:
    """
    Synchronous in-process publish/subscribe channel shared by all views.

    Purpose:
    - One gesture in one view (hovering a year, a country, moving the slider)
      fans out to every other subscribed view

    Design Notes:
    - publish() calls every current subscriber of the channel, in subscription
      order, before returning
    - a handler that raises is logged and skipped; the rest still run
    - no replay: a handler subscribed after a publish never sees it
    - handlers may receive the same event more than once and must tolerate it
    """

    def __init__(self, channels=CHANNELS):
        self._handlers: Dict[str, List[Handler]] = {name: [] for name in channels}

    def _check(self, channel: str) -> None:
        if channel not in self._handlers:
            raise ValueError(f"Unknown channel '{channel}'")

    def subscribe(self, channel: str, handler: Handler) -> Callable[[], None]:
        """
        Register a handler on a channel.

        :return: a callable removing this subscription
        :raises ValueError: if the channel does not exist
        """
        self._check(channel)
        self._handlers[channel].append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(channel, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, channel: str, payload: Any = None) -> List[Exception]:
        """
        Deliver payload to every handler of the channel.

        :return: exceptions raised by handlers (empty when all succeeded)
        """
        self._check(channel)
        errors: List[Exception] = []

        # Snapshot so handlers subscribing/unsubscribing mid-publish don't affect this delivery
        for handler in list(self._handlers[channel]):
            try:
                handler(payload)
            except Exception as e:
                logger.exception(
                    "Handler failed on coordination bus",
                    extra={"channel": channel, "handler": getattr(handler, "__qualname__", repr(handler))},
                )
                errors.append(e)
        return errors

    def subscriber_count(self, channel: str) -> int:
        self._check(channel)
        return len(self._handlers[channel])

    def clear(self) -> None:
        for handlers in self._handlers.values():
            handlers.clear()
