from __future__ import annotations

import logging
import typing as t

from quizzical.model import OverrideEvent

logger = logging.getLogger(__name__)

Listener = t.Callable[[OverrideEvent], None]


class OverrideEventEmitter(object):
    """Audit trail of override changes.

    Every event is logged, then handed to each subscribed listener. Delivery is
    best-effort: a failing listener is logged and the rest still run.
    """

    def __init__(self) -> None:
        self.listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> t.Callable[[], None]:
        """Register `listener`; returns a callable that unsubscribes it"""
        self.listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self.listeners:
                self.listeners.remove(listener)

        return unsubscribe

    def emit(self, event: OverrideEvent) -> None:
        logger.info(event.name, extra=event.model_dump(mode="json"))
        for listener in list(self.listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "override event listener failed",
                    extra={"event": event.name, "override_id": event.override_id, "listener": repr(listener)},
                )
