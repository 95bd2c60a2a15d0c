import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, ClassVar, Generic, List, Optional, TypeVar

from photo_search.logging_conf import logger

T = TypeVar("T")


class Status(Enum):
    RUNNING = "running"
    SUCCESS = "success"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class NetworkState:
    """Outcome of the most recent fetch attempt of a paging session."""

    status: Status
    msg: Optional[str] = None

    LOADING: ClassVar["NetworkState"]
    SUCCESS: ClassVar["NetworkState"]
    EMPTY: ClassVar["NetworkState"]

    @classmethod
    def error(cls, msg: Optional[str]) -> "NetworkState":
        return cls(Status.FAILED, msg)

    @property
    def is_loading(self) -> bool:
        return self.status is Status.RUNNING


NetworkState.LOADING = NetworkState(Status.RUNNING)
NetworkState.SUCCESS = NetworkState(Status.SUCCESS)
NetworkState.EMPTY = NetworkState(Status.EMPTY)


class ValueHolder(Generic[T]):
    """
    Observable cell holding a single current value.

    Values may be posted from any thread. Each post replaces the previous
    value and is handed to every observer registered at that moment.
    """

    def __init__(self, initial: Optional[T] = None):
        self._value = initial
        self._observers: List[Callable[[T], None]] = []
        self._lock = threading.Lock()

    @property
    def value(self) -> Optional[T]:
        with self._lock:
            return self._value

    def post_value(self, value: T) -> None:
        with self._lock:
            self._value = value
            observers = list(self._observers)

        for observer in observers:
            try:
                observer(value)
            except Exception as e:
                logger.error(f"Observer {observer!r} failed on {value!r}: {e}")

    def observe(self, observer: Callable[[T], None]) -> Callable[[], None]:
        """Register an observer. Returns a function that unregisters it."""
        with self._lock:
            self._observers.append(observer)

        def remove():
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return remove


class NetworkStateHolder(ValueHolder[NetworkState]):
    """Holds the current NetworkState; None until the first fetch starts."""
