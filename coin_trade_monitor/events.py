"""Monitor lifecycle events and a fire-and-forget emitter for observers."""

import logging
import threading
import time
from collections import defaultdict, deque
from typing import Any, Callable, Deque, Dict, List, Tuple

logger = logging.getLogger(__name__)

MONITOR_START = "monitor:start"
MONITOR_LOAD_COINS = "monitor:load_coins"
MONITOR_INIT_COINS = "monitor:init_coins"
MONITOR_CYCLE = "monitor:cycle"
MONITOR_CHECK_COIN = "monitor:check_coin"
MONITOR_PRICE_CHANGE = "monitor:price_change"
MONITOR_MAKE_ORDER = "monitor:make_order"
MONITOR_ORDER_DONE = "monitor:order_done"

# Failure events
MONITOR_COIN_ERROR = "monitor:coin_error"
MONITOR_ORDER_FAILED = "monitor:order_failed"
MONITOR_PERSISTENCE_ERROR = "monitor:persistence_error"

WILDCARD = "*"

Listener = Callable[..., Any]


class EventEmitter:
    """
    Synchronous event emitter whose listeners can never break the caller.

    Each listener runs inside its own try/except; failures are logged and
    dropped. Listeners must return quickly. Slow consumers should subscribe
    through an EventBuffer instead of doing work inline.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)
        self._lock = threading.Lock()

    def on(self, event: str, listener: Listener) -> None:
        with self._lock:
            self._listeners[event].append(listener)

    def off(self, event: str, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners.get(event, []):
                self._listeners[event].remove(listener)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def emit(self, event: str, *payload: Any) -> None:
        with self._lock:
            targeted = list(self._listeners.get(event, []))
            wildcard = list(self._listeners.get(WILDCARD, []))

        for listener in targeted:
            self._dispatch(listener, event, payload)
        for listener in wildcard:
            self._dispatch(listener, event, (event, *payload))

    @staticmethod
    def _dispatch(listener: Listener, event: str, args: tuple) -> None:
        try:
            listener(*args)
        except Exception as e:
            logger.warning(
                f"Event listener {getattr(listener, '__name__', listener)!r} "
                f"failed on {event}: {e}"
            )


class EventBuffer:
    """
    Bounded event buffer with a drop-oldest policy.

    Subscribe it with ``emitter.on("*", buffer)`` and read events later with
    ``drain()``. Appending never blocks; once full, the oldest event is
    discarded.
    """

    def __init__(self, maxlen: int = 1000):
        self._events: Deque[Tuple[str, tuple, float]] = deque(maxlen=maxlen)
        self.dropped = 0

    def __call__(self, event: str, *payload: Any) -> None:
        if len(self._events) == self._events.maxlen:
            self.dropped += 1
        self._events.append((event, payload, time.time()))

    def __len__(self) -> int:
        return len(self._events)

    def drain(self) -> List[Tuple[str, tuple, float]]:
        events = []
        while self._events:
            events.append(self._events.popleft())
        return events


class LoggingEventListener:
    """Forward monitor events to the logging module."""

    _WARNING_EVENTS = {
        MONITOR_COIN_ERROR,
        MONITOR_ORDER_FAILED,
        MONITOR_PERSISTENCE_ERROR,
    }

    def __init__(self, event_logger: logging.Logger = None):
        self.logger = event_logger or logging.getLogger("coin_trade_monitor.events")

    def __call__(self, event: str, *payload: Any) -> None:
        level = logging.WARNING if event in self._WARNING_EVENTS else logging.INFO
        self.logger.log(level, "%s %s", event, self._describe(payload))

    @staticmethod
    def _describe(payload: tuple) -> str:
        parts = []
        for item in payload:
            if isinstance(item, list):
                parts.append(f"[{len(item)} pairs]")
            elif hasattr(item, "id") and hasattr(item, "symbol"):
                parts.append(f"{item.id}")
            else:
                parts.append(str(item))
        return " ".join(parts)
