"""Push-based observation helper."""

from typing import Callable, Generic, TypeVar

from autofinder.infrastructure.logging.logger import logger

T = TypeVar("T")

Listener = Callable[[T], None]
Unsubscribe = Callable[[], None]


class Observable(Generic[T]):
    """Keeps a list of listeners and pushes values to them in subscription order."""

    def __init__(self, name: str) -> None:
        """
        Initialize observable.

        Args:
            name: Name used in log lines when a listener fails
        """
        self._name = name
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """
        Register a listener.

        Args:
            listener: Callable receiving every pushed value

        Returns:
            Callable that removes the listener; calling it twice is harmless
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, value: T) -> None:
        """
        Push a value to every listener.

        A failing listener is logged and skipped.

        Args:
            value: Value to push
        """
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception as e:
                logger.warning(f"Listener of {self._name} failed: {str(e)}")

    @property
    def listener_count(self) -> int:
        """Number of registered listeners."""
        return len(self._listeners)
