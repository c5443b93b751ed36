"""
Event primitives - Signals and Subscription handles.

Provides:
- Signal: Simple synchronous observer (Qt-like connect/emit without QObject)
- Subscription: Handle returned by connect(); disposing it unsubscribes exactly once
- CompositeSubscription: Collects handles and releases them together on teardown

Usage:
    startup = Signal("Startup")
    sub = startup.connect(on_startup)
    startup.emit(args)
    sub.dispose()   # further calls are no-ops
"""
import threading
from typing import Callable, List, Optional
from loguru import logger


class Subscription:
    """
    Handle for a registered callback.

    Calling dispose() runs the unsubscribe action once; later calls do nothing.
    """

    def __init__(self, unsubscribe: Optional[Callable[[], None]] = None, name: str = ""):
        self._unsubscribe = unsubscribe
        self._lock = threading.Lock()
        self.name = name

    @property
    def disposed(self) -> bool:
        return self._unsubscribe is None

    def dispose(self) -> None:
        with self._lock:
            action, self._unsubscribe = self._unsubscribe, None
        if action is not None:
            action()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()

    def __repr__(self):
        state = "disposed" if self.disposed else "active"
        return f"<Subscription {self.name or '?'} ({state})>"


class CompositeSubscription(Subscription):
    """
    Group of subscriptions released together, in reverse order of registration.
    """

    def __init__(self, name: str = ""):
        self._children: List[Subscription] = []
        super().__init__(self._release_children, name)

    def add(self, subscription: Subscription) -> Subscription:
        """Track a subscription. Adding to a disposed group disposes it immediately."""
        if self.disposed:
            subscription.dispose()
        else:
            self._children.append(subscription)
        return subscription

    def __len__(self):
        return len(self._children)

    def _release_children(self) -> None:
        children, self._children = self._children, []
        for child in reversed(children):
            child.dispose()


class Signal:
    """
    A simple observer pattern implementation (Synchronous).
    Allows subscribers to connect to this signal and receive notifications.
    Equivalent to Qt's Signal or C#'s event.

    Subscriber errors are logged. With propagate=True they are re-raised
    after logging and stop the remaining subscribers.
    """
    def __init__(self, name: str = "Signal", propagate: bool = False):
        self.name = name
        self.propagate = propagate
        self._subscribers: List[Callable] = []

    def connect(self, callback: Callable) -> Subscription:
        """Connect a callback function to this signal."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)
        return Subscription(lambda: self.disconnect(callback), self.name)

    def disconnect(self, callback: Callable):
        """Disconnect a callback function from this signal."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def emit(self, *args, **kwargs):
        """Broadcast arguments to all subscribers synchronously."""
        for sub in list(self._subscribers):
            try:
                sub(*args, **kwargs)
            except Exception as e:
                logger.error(f"Signal '{self.name}' error in subscriber '{sub}': {e}")
                if self.propagate:
                    raise
