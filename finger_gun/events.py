import logging
from dataclasses import dataclass, field
from typing import Callable, List, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandsDetected:
    """Detector output for one captured frame. `hands` may be empty."""

    hands: Sequence = field(default_factory=tuple)
    frame_index: int = 0


Handler = Callable[[HandsDetected], None]


class EventChannel:
    """Synchronous publish/subscribe channel.

    Handlers run in subscription order on the publisher's thread; an exception
    raised by a handler propagates to the publisher.
    """

    def __init__(self):
        self._handlers: List[Handler] = []

    def subscribe(self, handler: Handler) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe():
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def publish(self, event: HandsDetected) -> None:
        logger.debug("frame %d: %d hand(s)", event.frame_index, len(event.hands))
        for handler in list(self._handlers):
            handler(event)
