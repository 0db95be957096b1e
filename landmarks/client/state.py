"""
Observable display state for the map client.

The presentation layer renders from these objects only. An empty result
and a failed fetch are distinct statuses so the UI can never show "no
landmarks here" when the truth is "we could not ask".
"""

from enum import Enum
from typing import Callable, Generic, List, Optional, TypeVar

from landmarks.core.exceptions import LandmarkError
from landmarks.models.dto import Landmark, LandmarkDetail

T = TypeVar("T")


class Status(str, Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    EMPTY = "EMPTY"
    READY = "READY"
    ERROR = "ERROR"


class Observable(Generic[T]):
    def __init__(self):
        self._listeners: List[Callable[[T], None]] = []

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)


class ListState(Observable["ListState"]):
    """Landmarks currently shown as markers and in the sidebar list."""

    def __init__(self):
        super().__init__()
        self.status = Status.IDLE
        self.landmarks: List[Landmark] = []
        self.error: Optional[LandmarkError] = None

    def loading(self) -> None:
        self.status = Status.LOADING
        self.error = None
        self._notify()

    def loaded(self, landmarks: List[Landmark]) -> None:
        self.landmarks = list(landmarks)
        self.status = Status.READY if self.landmarks else Status.EMPTY
        self.error = None
        self._notify()

    def failed(self, error: LandmarkError) -> None:
        # Previous markers are kept on screen, the error badge offers the retry
        self.status = Status.ERROR
        self.error = error
        self._notify()


class DetailState(Observable["DetailState"]):
    """Detail panel for the selected landmark."""

    def __init__(self):
        super().__init__()
        self.status = Status.IDLE
        self.pageid: Optional[int] = None
        self.detail: Optional[LandmarkDetail] = None
        self.error: Optional[LandmarkError] = None

    def loading(self, pageid: int) -> None:
        self.status = Status.LOADING
        self.pageid = pageid
        self.detail = None
        self.error = None
        self._notify()

    def loaded(self, detail: LandmarkDetail) -> None:
        self.status = Status.READY
        self.detail = detail
        self.error = None
        self._notify()

    def failed(self, error: LandmarkError) -> None:
        self.status = Status.ERROR
        self.detail = None
        self.error = error
        self._notify()

    def clear(self) -> None:
        self.status = Status.IDLE
        self.pageid = None
        self.detail = None
        self.error = None
        self._notify()
