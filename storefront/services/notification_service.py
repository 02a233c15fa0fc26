# storefront/services/notification_service.py
from typing import Callable

from storefront.utils.logging import get_logger

logger = get_logger(__name__)

Sink = Callable[[str, str], object]


class NotificationService:
    """
    Komunikaty dla uzytkownika (toast w UI).
    Sink to zewnetrzny kolaborator, bez niego tylko logujemy.
    """

    def __init__(self, sink: Sink | None = None):
        self.sink = sink

    def notify(self, message: str, level: str = "info"):
        logger.info(f"[NOTIFICATION:{level}] {message}")

        if self.sink is not None:
            self.sink(message, level)

    def success(self, message: str):
        self.notify(message, "success")

    def info(self, message: str):
        self.notify(message, "info")

    def error(self, message: str):
        self.notify(message, "error")
