from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class NotificationSink(ABC):
    @abstractmethod
    def notify(self, user_id: int, message: str) -> None:
        """Fire-and-forget delivery."""
        raise NotImplementedError


class LoggingNotificationSink(NotificationSink):
    def notify(self, user_id: int, message: str) -> None:
        logger.info("notify user=%d: %s", user_id, message)
