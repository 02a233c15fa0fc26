# storefront/services/session.py
import threading
from dataclasses import dataclass
from typing import Callable, List, Union

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Guest:
    @property
    def user_id(self) -> None:
        return None

    @property
    def authenticated(self) -> bool:
        return False


@dataclass(frozen=True)
class Authenticated:
    user_id: str

    @property
    def authenticated(self) -> bool:
        return True


Session = Union[Guest, Authenticated]
SessionListener = Callable[[Session], object]


class SessionContext:
    """
    Jedno zrodlo prawdy o aktualnej sesji, tworzone raz przy starcie.
    -dostawca tozsamosci wola publish()
    -silnik subskrybuje raz (subscribe)
    -ready ustawiane przy pierwszej publikacji, zamiast odpytywania w petli
    """

    def __init__(self):
        self._session: Session = Guest()
        self._listeners: List[SessionListener] = []
        self._lock = threading.Lock()
        self.ready = threading.Event()

    @property
    def current(self) -> Session:
        return self._session

    def subscribe(self, listener: SessionListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def publish(self, session: Session) -> list:
        with self._lock:
            previous = self._session
            self._session = session
            listeners = list(self._listeners)

        logger.info(f"Session change {previous} -> {session}")
        self.ready.set()

        return [listener(session) for listener in listeners]

    def wait_ready(self, timeout: float | None = None) -> bool:
        return self.ready.wait(timeout)
