"""Ordered, failure-isolated event delivery for one event family.

Every producer owns one Broadcaster per event family it emits. Listeners
are called in registration order, synchronously with ``broadcast``. A
listener that raises is logged and skipped; delivery continues with the
next listener.

Deliveries through the same Broadcaster never interleave. Different
Broadcasters (other families or other producers) deliver independently.
"""

import logging
import threading
from collections.abc import Callable
from typing import Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)


class Listener(Protocol[T_contra]):
    """Single-method listener capability."""

    def receive(self, event: T_contra) -> None:
        """Handle one event."""
        ...


class Broadcaster(Generic[T]):
    """Fan out events of one family to all registered listeners.

    Listeners may be plain callables or objects with a ``receive`` method.

    Example:
        packets: Broadcaster[AudioPacket] = Broadcaster("audio-packet")
        packets.add_listener(recorder_manager)
        packets.add_listener(lambda packet: print(packet))
        packets.broadcast(packet)
    """

    def __init__(self, family: str) -> None:
        """Initialize the broadcaster.

        Args:
            family: Event family name, used in log messages.
        """
        self._family = family
        self._listeners: list[Callable[[T], None]] = []
        self._names: list[str] = []
        # Reentrant so a listener may broadcast on the same family
        self._delivery_lock = threading.RLock()
        self._listeners_lock = threading.Lock()

    @property
    def family(self) -> str:
        """Return the event family name."""
        return self._family

    @property
    def listener_count(self) -> int:
        """Return the number of registered listeners."""
        with self._listeners_lock:
            return len(self._listeners)

    @property
    def listener_names(self) -> list[str]:
        """Return listener descriptions in delivery order."""
        with self._listeners_lock:
            return list(self._names)

    def add_listener(self, listener: Listener[T] | Callable[[T], None]) -> None:
        """Register a listener; it receives every later event of this family."""
        receive = getattr(listener, "receive", None)
        if callable(receive):
            callback = receive
            name = type(listener).__name__
        elif callable(listener):
            callback = listener
            name = getattr(listener, "__qualname__", None) or type(listener).__name__
        else:
            raise TypeError(f"{listener!r} is neither callable nor has a receive() method")
        with self._listeners_lock:
            self._listeners.append(callback)
            self._names.append(name)
        logger.debug("Registered %s listener: %s", self._family, name)

    def broadcast(self, event: T) -> None:
        """Deliver ``event`` to every listener in registration order."""
        with self._delivery_lock:
            with self._listeners_lock:
                listeners = list(zip(self._listeners, self._names, strict=True))

            for callback, name in listeners:
                try:
                    callback(event)
                except Exception:
                    logger.exception("Error delivering %s event to %s", self._family, name)
